"""
Index repository.

The store cannot list its keys, so every card id is recorded in one
well-known index entry. This module reads that entry and appends to it.

LIMITATION: ``append_id`` is a read-modify-write of the whole index with no
isolation. Two concurrent appends can race and one of them is lost (last
writer wins). Callers that need exactly-once registration must serialize
appends themselves.
"""

import logging

from ledgerdeck.config import settings
from ledgerdeck.services.record_codec import decode_index, encode_index
from ledgerdeck.store.base import LedgerStore, WriteReceipt

logger = logging.getLogger(__name__)


class IndexRepository:
    """Reads and extends the key index stored under ``index_key``."""

    def __init__(self, store: LedgerStore, index_key: str | None = None) -> None:
        self.store = store
        self.index_key = index_key or settings.index_key

    async def read_index(self) -> list[str]:
        """
        Read the ordered list of record ids.

        An absent index and a malformed index both read as empty.
        Transport errors propagate.
        """
        data = await self.store.get(self.index_key)
        return decode_index(data)

    async def append_id(self, record_id: str) -> WriteReceipt:
        """
        Append an id to the end of the index.

        No dedup: appending the same id twice stores it twice.
        """
        ids = await self.read_index()
        ids.append(record_id)
        receipt = await self.store.set(self.index_key, encode_index(ids))
        logger.info(
            "index_appended",
            extra={"record_id": record_id, "index_size": len(ids), "revision": receipt.revision},
        )
        return receipt
