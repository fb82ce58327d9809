"""Ping & Readiness - liveness never touches the DB, readiness does."""

from unittest.mock import MagicMock

import pytest

import octopus.infrastructure.database as db_module
import octopus.main as main_module
from octopus.config import Settings
from octopus.core.errors import CookieError


async def test_ping_returns_pong(client):
    res = await client.get("/api/v1/ping")
    assert res.status_code == 200
    assert res.json() == {"pong": True}


async def test_readiness_reports_healthy_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy"}


async def test_readiness_without_database_is_503(client):
    db_module.db_manager = None
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"


async def test_startup_refuses_missing_cookie_keys(monkeypatch):
    settings = Settings(cookie_hash_key="", cookie_encrypt_key="")
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(main_module, "setup_logging", lambda level, fmt: None)
    init_db = MagicMock()
    monkeypatch.setattr(main_module, "init_db", init_db)

    with pytest.raises(CookieError):
        async with main_module.lifespan(main_module.app):
            pass
    init_db.assert_not_called()
