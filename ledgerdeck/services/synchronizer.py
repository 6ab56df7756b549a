"""
Collection synchronizer.

Keeps a local snapshot of the card collection consistent with the ledger.

Refresh reads the index, then every record it names, drops whatever cannot
be read or decoded, sorts newest first and swaps the snapshot in with a
single assignment.

Create is two independent store writes: the record, then the index append.
They are NOT atomic. If the append fails the record is left in the store as
an orphan, invisible to refresh, and ``OrphanedRecordError`` is raised. There
is no rollback.

No internal locking: overlapping refreshes may finish out of order (last
completion wins), and overlapping creates may lose an index append.
"""

import asyncio
import logging
import secrets
import string
import time
from collections.abc import Callable
from dataclasses import dataclass

from ledgerdeck.config import settings
from ledgerdeck.models.card import CardDraft, CardRecord
from ledgerdeck.models.failure import (
    InvalidCardError,
    OrphanedRecordError,
    StoreTransportError,
    StoreUnavailableError,
)
from ledgerdeck.models.snapshot import CollectionSnapshot
from ledgerdeck.services.index_repository import IndexRepository
from ledgerdeck.services.record_codec import DecodeResult, decode_record, encode_record
from ledgerdeck.store.base import LedgerStore

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 7


def generate_record_id(now: float | None = None) -> str:
    """
    Generate a record id: epoch milliseconds plus 7 random base36 chars.

    Example: ``"1718000000000-k3x9q2a"``
    """
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{millis}-{suffix}"


@dataclass(frozen=True, slots=True)
class _RecordRead:
    """Outcome of reading one index entry."""

    record_id: str
    result: DecodeResult | None
    """None when the read itself failed."""


class CollectionSynchronizer:
    """
    Owns the collection snapshot for one session.

    Readers get the snapshot through ``snapshot``; it is immutable and only
    ever replaced, never modified.
    """

    def __init__(
        self,
        store: LedgerStore,
        index_key: str | None = None,
        record_key_prefix: str | None = None,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """
        Args:
            store: Ledger store collaborator
            index_key: Key of the index entry. Defaults to settings.index_key.
            record_key_prefix: Prefix of record keys. Defaults to settings.record_key_prefix.
            clock: Returns current epoch seconds
            id_factory: Returns a fresh record id. Defaults to generate_record_id.
        """
        self.store = store
        self.index = IndexRepository(store, index_key)
        self.record_key_prefix = (
            record_key_prefix if record_key_prefix is not None else settings.record_key_prefix
        )
        self.clock = clock
        self.id_factory = id_factory or (lambda: generate_record_id(self.clock()))
        self._snapshot = CollectionSnapshot.empty()

    @property
    def snapshot(self) -> CollectionSnapshot:
        return self._snapshot

    def record_key(self, record_id: str) -> str:
        """Store key of a record. Distinct ids always map to distinct keys."""
        return f"{self.record_key_prefix}{record_id}"

    async def is_available(self) -> bool:
        """Availability check. False means: no reads or writes this cycle."""
        return await self.store.is_available()

    async def _read_record(self, record_id: str) -> _RecordRead:
        try:
            data = await self.store.get(self.record_key(record_id))
        except StoreTransportError as e:
            logger.warning("Error loading card %s: %s", record_id, e.detail or e.message)
            return _RecordRead(record_id=record_id, result=None)
        return _RecordRead(record_id=record_id, result=decode_record(data, record_id))

    async def refresh(self) -> CollectionSnapshot:
        """
        Rebuild the snapshot from the ledger.

        Returns:
            The new snapshot, also available as ``snapshot``.

        Raises:
            StoreUnavailableError: Availability check returned false. The previous snapshot
                is kept and attached to the error.
            StoreTransportError: The index itself could not be read.
        """
        if not await self.is_available():
            logger.error("Ledger is not available; keeping previous snapshot")
            raise StoreUnavailableError(snapshot=self._snapshot)

        ids = await self.index.read_index()
        reads = await asyncio.gather(*(self._read_record(record_id) for record_id in ids))

        records: list[CardRecord] = []
        missing: list[str] = []
        malformed: list[str] = []
        unreadable: list[str] = []

        for read in reads:
            if read.result is None:
                unreadable.append(read.record_id)
            elif read.result.record is not None:
                records.append(read.result.record)
            elif read.result.absent:
                missing.append(read.record_id)
            else:
                logger.warning(
                    "Error parsing card data for %s: %s", read.record_id, read.result.error
                )
                malformed.append(read.record_id)

        # sorted() is stable, so equal timestamps keep index order
        records = sorted(records, key=lambda r: r.created_at, reverse=True)

        snapshot = CollectionSnapshot(
            records=tuple(records),
            refreshed_at=self.clock(),
            missing_ids=tuple(missing),
            malformed_ids=tuple(malformed),
            unreadable_ids=tuple(unreadable),
        )
        if snapshot.skipped_count:
            logger.info(
                "collection_refreshed_with_skips",
                extra={
                    "loaded": len(records),
                    "missing": len(missing),
                    "malformed": len(malformed),
                    "unreadable": len(unreadable),
                },
            )
        self._snapshot = snapshot
        return snapshot

    async def create_record(self, draft: CardDraft) -> CardRecord:
        """
        Write a new card, register it in the index, then refresh.

        Raises:
            InvalidCardError: The draft failed validation (nothing written)
            StoreUnavailableError: Availability check returned false (nothing written)
            StoreTransportError: The record write failed (nothing written)
            OrphanedRecordError: The record was written but the index append
                failed; the record is left in place
        """
        errors = draft.validation_errors()
        if errors:
            raise InvalidCardError("; ".join(errors))

        if not await self.is_available():
            raise StoreUnavailableError(snapshot=self._snapshot)

        record = draft.to_record(record_id=self.id_factory(), created_at=int(self.clock()))
        await self.store.set(self.record_key(record.id), encode_record(record))

        try:
            await self.index.append_id(record.id)
        except StoreTransportError as e:
            logger.warning(
                "orphaned_record",
                extra={"record_id": record.id, "reason": e.detail or e.message},
            )
            raise OrphanedRecordError(record.id, detail=e.detail or e.message) from e

        logger.info("card_created", extra={"record_id": record.id, "owner": record.owner})
        await self.refresh()
        return record
