"""Key-value stores backing the saved-project history."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from psycopg2.extras import RealDictCursor

from app.db.connection import get_pool

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class JsonFileStore:
    """String values kept in a single JSON object on disk.

    Raises ``ValueError`` on reads when the file is not a JSON object, so
    callers can treat corrupt data as they see fit.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"Store file {self.path} does not hold a JSON object")
        return data

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)

    def _load_for_write(self) -> dict[str, str]:
        try:
            return self._load()
        except ValueError as exc:
            logger.warning("Overwriting unreadable store file %s: %s", self.path, exc)
            return {}

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def put(self, key: str, value: str) -> None:
        data = self._load_for_write()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load_for_write()
        if data.pop(key, None) is not None:
            self._dump(data)


_CREATE_TABLE_SQL = (
    "CREATE TABLE IF NOT EXISTS kv_store ("
    "key TEXT PRIMARY KEY, value TEXT NOT NULL, updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW())"
)


class PostgresStore:
    """String values in a ``kv_store`` table (psycopg2)."""

    def __init__(self) -> None:
        self._table_ready = False

    def _execute(self, sql: str, params: list[Any] | None = None, *, fetch: str | None = None):
        pool = get_pool()
        conn = pool.getconn()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                if not self._table_ready:
                    cur.execute(_CREATE_TABLE_SQL)
                    self._table_ready = True
                cur.execute(sql, params or [])
                row = cur.fetchone() if fetch == "one" else None
            conn.commit()
            return row
        except Exception:
            conn.rollback()
            raise
        finally:
            pool.putconn(conn)

    def get(self, key: str) -> str | None:
        row = self._execute("SELECT value FROM kv_store WHERE key = %s", [key], fetch="one")
        return row["value"] if row else None

    def put(self, key: str, value: str) -> None:
        self._execute(
            "INSERT INTO kv_store (key, value) VALUES (%s, %s) "
            "ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()",
            [key, value],
        )

    def delete(self, key: str) -> None:
        self._execute("DELETE FROM kv_store WHERE key = %s", [key])
