"""Tests for project store backend selection logic."""

import psycopg2
import pytest

from app.db import repository_factory
from app.db.kv_store import JsonFileStore, PostgresStore


def _unavailable():
    raise psycopg2.OperationalError("connection refused")


def test_get_repository_uses_json_store_by_default(monkeypatch, tmp_path):
    monkeypatch.setattr(repository_factory.settings, "store_backend", "json")
    monkeypatch.setattr(repository_factory.settings, "store_json_path", str(tmp_path / "h.json"))
    repo = repository_factory.get_repository()
    assert isinstance(repo.store, JsonFileStore)


def test_get_repository_returns_postgres_store_when_pool_available(monkeypatch):
    monkeypatch.setattr(repository_factory.settings, "store_backend", "psycopg2")
    monkeypatch.setattr(repository_factory, "get_pool", lambda: object())
    repo = repository_factory.get_repository()
    assert isinstance(repo.store, PostgresStore)


def test_get_repository_falls_back_to_json_when_postgres_unavailable(monkeypatch, tmp_path):
    monkeypatch.setattr(repository_factory.settings, "store_backend", "psycopg2")
    monkeypatch.setattr(repository_factory.settings, "store_fallback_to_json", True)
    monkeypatch.setattr(repository_factory.settings, "store_json_path", str(tmp_path / "h.json"))
    monkeypatch.setattr(repository_factory, "get_pool", _unavailable)
    repo = repository_factory.get_repository()
    assert isinstance(repo.store, JsonFileStore)


def test_get_repository_raises_when_postgres_unavailable_and_fallback_disabled(monkeypatch):
    monkeypatch.setattr(repository_factory.settings, "store_backend", "psycopg2")
    monkeypatch.setattr(repository_factory.settings, "store_fallback_to_json", False)
    monkeypatch.setattr(repository_factory, "get_pool", _unavailable)
    with pytest.raises(RuntimeError, match="PostgreSQL store requested but database not available"):
        repository_factory.get_repository()
