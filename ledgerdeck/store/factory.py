import logging

from ledgerdeck.config import Settings, settings
from ledgerdeck.store.base import LedgerStore
from ledgerdeck.store.http import HttpLedgerStore
from ledgerdeck.store.memory import InMemoryStore
from ledgerdeck.store.sql import SqlLedgerStore

logger = logging.getLogger(__name__)


def build_store(config: Settings | None = None) -> LedgerStore:
    """
    Build the ledger store selected by ``store_backend``.

    Raises:
        ValueError: If the backend name is not recognized
    """
    config = config or settings
    logger.info("Using %s ledger store", config.store_backend)

    if config.store_backend == "memory":
        return InMemoryStore()
    if config.store_backend == "sql":
        from ledgerdeck.db.database import async_session_factory

        return SqlLedgerStore(async_session_factory)
    if config.store_backend == "http":
        return HttpLedgerStore(config.store_url, config.store_timeout_seconds)

    raise ValueError(f"Unknown store backend: {config.store_backend}")
