from ledgerdeck.models.card import CardDraft, CardRecord, CardStatus
from ledgerdeck.models.failure import (
    ApiResponse,
    FailureDetail,
    FailureKind,
    InvalidCardError,
    KnownError,
    OrphanedRecordError,
    OutcomeType,
    StoreTransportError,
    StoreUnavailableError,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from ledgerdeck.models.snapshot import CollectionSnapshot

__all__ = [
    "ApiResponse",
    "CardDraft",
    "CardRecord",
    "CardStatus",
    "CollectionSnapshot",
    "FailureDetail",
    "FailureKind",
    "InvalidCardError",
    "KnownError",
    "OrphanedRecordError",
    "OutcomeType",
    "StoreTransportError",
    "StoreUnavailableError",
    "create_unknown_failure",
    "finalize_response",
    "is_finalized",
]
