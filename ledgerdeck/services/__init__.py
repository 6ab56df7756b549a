"""
LedgerDeck services.

Codec, index maintenance, synchronization and derived views for the card
collection.
"""

from ledgerdeck.services.collection_view import (
    CollectionStats,
    count_by_status,
    filter_records,
    find_record,
    percentage_distribution,
    short_owner,
    summarize,
)
from ledgerdeck.services.index_repository import IndexRepository
from ledgerdeck.services.record_codec import (
    DecodeResult,
    decode_index,
    decode_record,
    encode_index,
    encode_record,
)
from ledgerdeck.services.synchronizer import CollectionSynchronizer, generate_record_id

__all__ = [
    "CollectionStats",
    "CollectionSynchronizer",
    "DecodeResult",
    "IndexRepository",
    "count_by_status",
    "decode_index",
    "decode_record",
    "encode_index",
    "encode_record",
    "filter_records",
    "find_record",
    "generate_record_id",
    "percentage_distribution",
    "short_owner",
    "summarize",
]
