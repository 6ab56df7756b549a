"""
Ledger CRUD operations.

Reads return the newest value for a key; writes always append.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerdeck.models.db import LedgerEntryDB


async def get_latest_entry(session: AsyncSession, key: str) -> LedgerEntryDB | None:
    """
    Get the newest ledger entry for a key.

    Returns None if the key was never written.
    """
    result = await session.execute(
        select(LedgerEntryDB)
        .where(LedgerEntryDB.key == key)
        .order_by(LedgerEntryDB.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def append_entry(session: AsyncSession, key: str, value: bytes) -> LedgerEntryDB:
    """Append a new value for a key. Earlier values are kept."""
    entry = LedgerEntryDB(key=key, value=value)
    session.add(entry)
    await session.flush()
    return entry


async def count_entries(session: AsyncSession, key: str) -> int:
    """Number of writes ever made to a key."""
    result = await session.execute(
        select(func.count()).select_from(LedgerEntryDB).where(LedgerEntryDB.key == key)
    )
    return result.scalar_one()
