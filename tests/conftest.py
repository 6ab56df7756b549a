from dataclasses import dataclass, field
from itertools import count

import pytest

from ledgerdeck.models import failure as failure_module
from ledgerdeck.models.card import CardRecord, CardStatus
from ledgerdeck.models.failure import StoreTransportError
from ledgerdeck.services.record_codec import encode_index, encode_record
from ledgerdeck.services.synchronizer import CollectionSynchronizer
from ledgerdeck.store.base import WriteReceipt
from ledgerdeck.store.memory import InMemoryStore

FIXED_NOW = 1_700_000_000.0


@pytest.fixture(autouse=True)
def clear_finalized_responses():
    """Reset the finalized-response registry so id() reuse cannot leak between tests."""
    failure_module._finalized_responses.clear()
    yield
    failure_module._finalized_responses.clear()


@dataclass
class FlakyStore(InMemoryStore):
    """In-memory store whose reads or writes fail for chosen keys."""

    failing_reads: set[str] = field(default_factory=set)
    failing_writes: set[str] = field(default_factory=set)
    check_error: bool = False

    async def get(self, key: str) -> bytes:
        if key in self.failing_reads:
            raise StoreTransportError(f"Failed to read {key}", detail="connection reset")
        return await super().get(key)

    async def set(self, key: str, value: bytes) -> WriteReceipt:
        if key in self.failing_writes:
            raise StoreTransportError(f"Failed to write {key}", detail="execution reverted")
        return await super().set(key, value)

    async def is_available(self) -> bool:
        if self.check_error:
            raise StoreTransportError("Availability check failed", detail="timeout")
        return await super().is_available()


def _make_record(
    record_id: str = "a",
    created_at: int = 100,
    name: str = "Dragon of Wizard",
    card_type: str = "Creature",
    status: CardStatus = CardStatus.AVAILABLE,
) -> CardRecord:
    return CardRecord(
        id=record_id,
        name=name,
        type=card_type,
        power=5,
        defense=3,
        payload="FHE-ENCRYPTED-e30=",
        created_at=created_at,
        owner="0x1234567890abcdef1234567890abcdef12345678",
        status=status,
    )


def _seed(store: InMemoryStore, *records: CardRecord, prefix: str = "card_") -> None:
    """Write records and an index listing them, bypassing the synchronizer."""
    for record in records:
        store.entries[f"{prefix}{record.id}"] = encode_record(record)
    store.entries["card_keys"] = encode_index([r.id for r in records])


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def synchronizer(store: FlakyStore) -> CollectionSynchronizer:
    ids = count(1)
    return CollectionSynchronizer(
        store,
        index_key="card_keys",
        record_key_prefix="card_",
        clock=lambda: FIXED_NOW,
        id_factory=lambda: f"id-{next(ids)}",
    )


@pytest.fixture
def make_record():
    """Factory for card records with sensible defaults."""
    return _make_record


@pytest.fixture
def seed():
    """Write records plus a matching index straight into a store."""
    return _seed
