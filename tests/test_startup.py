"""Tests for startup checks: required settings and the database probe."""
import logging

import pytest

import config
from web import run_api
from web.api import main as api_main


def test_missing_settings_names_each_unset_variable(monkeypatch):
    monkeypatch.setattr(config, "PORT", "8080")
    assert config.missing_settings() == []

    monkeypatch.setattr(config, "SESSION_SECRET", "")
    monkeypatch.setattr(config, "GOOGLE_CLIENT_ID", "")
    assert config.missing_settings() == ["GOOGLE_CLIENT_ID", "SESSION_SECRET"]


def test_run_api_exits_when_settings_missing(monkeypatch, caplog):
    started = []
    monkeypatch.setattr(config, "PORT", "")
    monkeypatch.setattr(run_api.uvicorn, "run", lambda *a, **kw: started.append(kw))

    with caplog.at_level(logging.ERROR, logger="poolleague"):
        with pytest.raises(SystemExit) as exc:
            run_api.main()
    assert exc.value.code == 1
    assert "Environment variable PORT is not set." in caplog.text
    assert started == []


def test_run_api_starts_server(monkeypatch):
    started = []
    monkeypatch.setattr(config, "PORT", "8123")
    monkeypatch.setattr(run_api.uvicorn, "run", lambda app, **kw: started.append((app, kw)))

    run_api.main()
    assert started == [("web.api.main:app", {"host": "0.0.0.0", "port": 8123, "log_config": None})]


@pytest.mark.asyncio
async def test_lifespan_fails_when_database_unreachable(monkeypatch):
    async def unreachable():
        raise ConnectionRefusedError("database down")

    monkeypatch.setattr(api_main, "check_connection", unreachable)
    with pytest.raises(ConnectionRefusedError):
        async with api_main.lifespan(api_main.app):
            pass


@pytest.mark.asyncio
async def test_lifespan_initialises_database(client, auth_headers):
    async with api_main.lifespan(api_main.app):
        r = await client.get("/api/roles", headers=auth_headers)
    assert r.status_code == 200
    assert {role["name"] for role in r.json()} == {"admin", "player"}
