"""
Ledger store adapters.

All adapters satisfy ``LedgerStore``: single-key get/set plus an availability
check.
"""

from ledgerdeck.store.base import LedgerStore, WriteReceipt
from ledgerdeck.store.http import HttpLedgerStore
from ledgerdeck.store.memory import InMemoryStore
from ledgerdeck.store.sql import SqlLedgerStore

__all__ = [
    "HttpLedgerStore",
    "InMemoryStore",
    "LedgerStore",
    "SqlLedgerStore",
    "WriteReceipt",
]
