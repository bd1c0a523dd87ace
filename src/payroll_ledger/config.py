"""Runtime configuration read from the environment (and an optional .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache

from dotenv import load_dotenv

from payroll_ledger.calculators.salary import RATE_PLACES

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default)
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"{name} must be a decimal number, got {raw!r}")
    if not value.is_finite() or value < 0:
        raise ValueError(f"{name} must be a non-negative number, got {raw!r}")
    if value.normalize().as_tuple().exponent < -RATE_PLACES:
        raise ValueError(f"{name} allows at most {RATE_PLACES} decimal places, got {raw!r}")
    return value


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Ledger settings.

    ``database_url`` selects the durable store; left empty, the ledger runs
    on the local JSON store at ``local_store_path``. The default rates seed
    a store that has no saved rate settings yet.
    """

    database_url: str
    local_store_path: str
    default_hourly_rate: Decimal
    default_unit_price: Decimal
    store_connect_timeout: float
    host: str
    port: int
    debug: bool
    log_level: str
    cors_origins: tuple[str, ...] = ("*",)

    @property
    def has_remote_store(self) -> bool:
        return bool(self.database_url)

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``DATABASE_URL``, ``LOCAL_STORE_PATH`` and friends."""
        load_dotenv()

        log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

        return cls(
            database_url=os.getenv("DATABASE_URL", "").strip(),
            local_store_path=os.getenv("LOCAL_STORE_PATH", "payroll_ledger_local.json"),
            default_hourly_rate=_env_decimal("DEFAULT_HOURLY_RATE", "20"),
            default_unit_price=_env_decimal("DEFAULT_UNIT_PRICE", "0.25"),
            store_connect_timeout=float(os.getenv("STORE_CONNECT_TIMEOUT", "5")),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
            debug=_env_flag("DEBUG"),
            log_level=log_level,
            cors_origins=tuple(
                origin.strip()
                for origin in os.getenv("CORS_ORIGINS", "*").split(",")
                if origin.strip()
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()
