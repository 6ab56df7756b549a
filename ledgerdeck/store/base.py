"""
Ledger store contract.

The store is the only durable owner of the index and of every card record.
It exposes single-key reads and writes and nothing else: no listing, no
queries, no multi-key transactions.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class WriteReceipt:
    """Confirmation that a value was durably written."""

    key: str
    revision: int


@runtime_checkable
class LedgerStore(Protocol):
    """
    Minimal key/value ledger interface.

    - ``get`` returns ``b""`` for an absent key; absence is never an error.
    - ``set`` raises ``StoreTransportError`` when the write fails.
    - ``is_available`` is an availability check, independent of whether any
      data exists. Adapters differ on how a failed check surfaces:
      ``SqlLedgerStore`` logs the database error and returns ``False``,
      while ``HttpLedgerStore`` raises ``StoreTransportError`` when the
      status call fails or answers with a malformed body. Callers must
      treat both as "not available" (see ``/ready``).
    """

    async def get(self, key: str) -> bytes: ...

    async def set(self, key: str, value: bytes) -> WriteReceipt: ...

    async def is_available(self) -> bool: ...
