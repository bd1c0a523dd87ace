"""Backend selection at startup."""

from __future__ import annotations

import logging

from payroll_ledger.calculators.types import RateSettings
from payroll_ledger.config import Settings, get_settings
from payroll_ledger.exceptions import StoreUnavailable
from payroll_ledger.store.base import WorkRecordStore
from payroll_ledger.store.local_store import LocalStore
from payroll_ledger.store.sql_store import SqlStore

logger = logging.getLogger(__name__)


def default_rate_settings(settings: Settings) -> RateSettings:
    """Rate settings used until the store holds its own."""
    return RateSettings(
        default_hourly_rate=settings.default_hourly_rate,
        default_unit_price=settings.default_unit_price,
    )


async def open_store(settings: Settings | None = None) -> WorkRecordStore:
    """Pick the store for this process.

    The durable store is used when configured and reachable. Otherwise the
    local store is used; it is a separate dataset and nothing is copied
    between the two.
    """
    settings = settings or get_settings()
    defaults = default_rate_settings(settings)

    if settings.has_remote_store:
        store = SqlStore.from_url(
            settings.database_url,
            connect_timeout=settings.store_connect_timeout,
            default_settings=defaults,
        )
        try:
            await store.ping()
            await store.initialize()
        except StoreUnavailable as exc:
            logger.warning(
                "Durable store unreachable (%s); using local store %s",
                exc.reason,
                settings.local_store_path,
            )
            await store.close()
        else:
            logger.info("Using durable store")
            return store

    logger.info("Using local store %s", settings.local_store_path)
    return LocalStore(settings.local_store_path, default_settings=defaults)
