from dataclasses import dataclass, field

from ledgerdeck.store.base import WriteReceipt


@dataclass
class InMemoryStore:
    """
    Dict-backed ledger store.

    Used for demos and tests. ``available`` flips the availability check.
    """

    entries: dict[str, bytes] = field(default_factory=dict)
    available: bool = True
    revision: int = 0

    async def get(self, key: str) -> bytes:
        return self.entries.get(key, b"")

    async def set(self, key: str, value: bytes) -> WriteReceipt:
        self.revision += 1
        self.entries[key] = bytes(value)
        return WriteReceipt(key=key, revision=self.revision)

    async def is_available(self) -> bool:
        return self.available
