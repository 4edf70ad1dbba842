"""Project store backend selection with JSON fallback."""

from __future__ import annotations

import logging

import psycopg2

from app.config import settings
from app.db.connection import get_pool
from app.db.kv_store import JsonFileStore, PostgresStore
from app.db.repository import ProjectRepository

logger = logging.getLogger(__name__)


def get_json_repository() -> ProjectRepository:
    return ProjectRepository(JsonFileStore(settings.store_json_path))


def get_repository() -> ProjectRepository:
    if settings.store_backend.lower() != "psycopg2":
        return get_json_repository()

    try:
        get_pool()
    except psycopg2.OperationalError as exc:
        if settings.store_fallback_to_json:
            logger.warning("PostgreSQL unavailable (%s), falling back to JSON store", exc)
            return get_json_repository()
        raise RuntimeError("PostgreSQL store requested but database not available") from exc

    return ProjectRepository(PostgresStore())
