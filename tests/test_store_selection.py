"""Tests for configuration and backend selection."""

from dataclasses import replace
from decimal import Decimal

import pytest

from payroll_ledger.config import Settings
from payroll_ledger.exceptions import StoreUnavailable
from payroll_ledger.store import LocalStore, SqlStore, open_store


@pytest.fixture
def app_settings(tmp_path) -> Settings:
    return Settings(
        database_url="",
        local_store_path=str(tmp_path / "local.json"),
        default_hourly_rate=Decimal("18"),
        default_unit_price=Decimal("0.30"),
        store_connect_timeout=1.0,
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
    )


class TestSettings:
    """Test loading settings from the environment."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://ledger@db/ledger")
        monkeypatch.setenv("DEFAULT_HOURLY_RATE", "22.5")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("DEBUG", "True")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.has_remote_store is True
        assert settings.default_hourly_rate == Decimal("22.5")
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_default_rate_precision_checked(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_UNIT_PRICE", "0.123456")

        with pytest.raises(ValueError):
            Settings.from_env()

    def test_cors_origins_are_split(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://payroll.example ,")

        settings = Settings.from_env()

        assert settings.cors_origins == ("http://localhost:5173", "https://payroll.example")

    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "DEFAULT_HOURLY_RATE", "DEFAULT_UNIT_PRICE", "LOCAL_STORE_PATH"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.has_remote_store is False
        assert settings.default_hourly_rate == Decimal("20")
        assert settings.default_unit_price == Decimal("0.25")
        assert settings.local_store_path == "payroll_ledger_local.json"


class TestOpenStore:
    """Test picking the durable or local store at startup."""

    async def test_local_when_no_remote_configured(self, app_settings):
        store = await open_store(app_settings)

        assert isinstance(store, LocalStore)
        assert (await store.get_settings()).default_hourly_rate == Decimal("18")

    async def test_durable_when_reachable(self, app_settings):
        settings = replace(app_settings, database_url="sqlite+aiosqlite:///:memory:")

        store = await open_store(settings)
        try:
            assert isinstance(store, SqlStore)
            assert await store.list_employees() == []
            assert (await store.get_settings()).default_unit_price == Decimal("0.30")
        finally:
            await store.close()

    async def test_falls_back_to_local_when_unreachable(self, app_settings, monkeypatch):
        settings = replace(app_settings, database_url="sqlite+aiosqlite:///:memory:")

        async def unreachable(self):
            raise StoreUnavailable("sql", "connection refused")

        monkeypatch.setattr(SqlStore, "ping", unreachable)

        store = await open_store(settings)

        assert isinstance(store, LocalStore)
        assert str(store.path) == app_settings.local_store_path

    async def test_fallback_data_stays_local(self, app_settings, monkeypatch):
        """Work written while degraded lives in the local file only."""
        durable_settings = replace(app_settings, database_url="sqlite+aiosqlite:///:memory:")

        async def unreachable(self):
            raise StoreUnavailable("sql", "connection refused")

        monkeypatch.setattr(SqlStore, "ping", unreachable)
        local = await open_store(durable_settings)
        await local.create_employee("Ana", None)

        reopened = await open_store(app_settings)

        assert [e.name for e in await reopened.list_employees()] == ["Ana"]
