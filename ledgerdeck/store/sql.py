import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledgerdeck.db.operations import append_entry, get_latest_entry
from ledgerdeck.models.failure import StoreTransportError
from ledgerdeck.store.base import WriteReceipt

logger = logging.getLogger(__name__)


class SqlLedgerStore:
    """
    Append-only ledger kept in a SQL database.

    Each ``set`` commits its own transaction, so two sets are never atomic
    together.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, key: str) -> bytes:
        try:
            async with self.session_factory() as session:
                entry = await get_latest_entry(session, key)
        except SQLAlchemyError as e:
            logger.error("Ledger read failed for %s: %s", key, e)
            raise StoreTransportError(f"Failed to read {key} from the ledger", detail=str(e)) from e
        return entry.value if entry is not None else b""

    async def set(self, key: str, value: bytes) -> WriteReceipt:
        try:
            async with self.session_factory() as session:
                entry = await append_entry(session, key, value)
                revision = entry.id
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Ledger write failed for %s: %s", key, e)
            raise StoreTransportError(f"Failed to write {key} to the ledger", detail=str(e)) from e
        return WriteReceipt(key=key, revision=revision)

    async def is_available(self) -> bool:
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("Ledger database unavailable: %s", e)
            return False
        return True
