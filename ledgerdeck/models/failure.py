"""
Failure envelope and error taxonomy.

Every user-visible outcome is classified before it leaves the API:

- Success: operation completed
- KnownFailure: the system knows why it failed (store down, bad input)
- UnknownFailure: anything else

Store errors are raised as ``KnownError`` subclasses so the API layer can
turn them into a classified envelope with a single exception handler.
Decode errors are NOT part of this taxonomy: malformed entries are dropped
and logged by the codec, never raised.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ledgerdeck.models.snapshot import CollectionSnapshot


class FailureKind(str, Enum):
    """Classification of failure types."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"

    # Store failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"
    ORPHANED_RECORD = "orphaned_record"

    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(..., description="Classification of the failure")
    message: str = Field(..., description="User-appropriate explanation of what went wrong")
    detail: str | None = Field(default=None, description="Additional technical detail")
    suggestion: str | None = Field(default=None, description="Suggested action for the user")


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope shared by the card endpoints."""

    outcome: OutcomeType
    data: T | None = None
    failure: FailureDetail | None = None


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to a finalized known-failure envelope."""
        return finalize_response(
            ApiResponse(
                outcome=OutcomeType.KNOWN_FAILURE,
                failure=FailureDetail(
                    kind=self.kind,
                    message=self.message,
                    detail=self.detail,
                    suggestion=self.suggestion,
                ),
            )
        )


class InvalidCardError(KnownError):
    """Raised when a card draft fails validation before any write."""

    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message="Card data is invalid.",
            detail=detail,
            suggestion="Fix the card fields and try again.",
            status_code=400,
        )


class StoreTransportError(KnownError):
    """
    A store call itself failed (network, database, rejected transaction).

    Propagated to the caller of refresh/create. Never retried by the core.
    """

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        kind: FailureKind = FailureKind.EXTERNAL_API_ERROR,
    ):
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            suggestion="Retry the operation. If it keeps failing, check the ledger connection.",
            status_code=502,
        )


class OrphanedRecordError(StoreTransportError):
    """
    The record was written but the index append failed.

    The record stays in the store, unreachable from the index. Nothing is
    rolled back.
    """

    def __init__(self, record_id: str, detail: str | None = None):
        self.record_id = record_id
        super().__init__(
            message=f"Card {record_id} was stored but could not be added to the collection index.",
            detail=detail,
            kind=FailureKind.ORPHANED_RECORD,
        )


class StoreUnavailableError(KnownError):
    """
    The store's availability check reported it unavailable.

    Carries the snapshot that was current when the check failed; it is
    returned unchanged.
    """

    def __init__(self, snapshot: "CollectionSnapshot | None" = None):
        self.snapshot = snapshot
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message="The card ledger is not available right now.",
            detail="Store availability check returned false",
            suggestion="Try again in a moment.",
            status_code=503,
        )


def is_user_rejection(message: str) -> bool:
    """Whether a transport failure came from the user declining to sign."""
    return "user rejected" in message.lower()


# =============================================================================
# AUTHORITY BOUNDARY
# =============================================================================

STANDARD_MESSAGES: dict[OutcomeType, str] = {
    OutcomeType.KNOWN_FAILURE: "The operation failed due to a known issue.",
    OutcomeType.UNKNOWN_FAILURE: (
        "I failed and I don't know why. Try refreshing the collection or retrying."
    ),
}

# Track finalized responses by id()
_finalized_responses: set[int] = set()


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Pass a response through the authority boundary.

    Raises:
        ValueError: If the outcome and failure details disagree
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    elif response.failure is None:
        raise ValueError(f"{response.outcome.value} response must have failure details")

    _finalized_responses.add(id(response))
    return response


def is_finalized(response: ApiResponse[Any]) -> bool:
    """Check if a response has passed through the authority boundary."""
    return id(response) in _finalized_responses


def create_unknown_failure(exception: Exception) -> ApiResponse[Any]:
    """
    Create a finalized unknown failure from an exception.

    The message is fixed; only the exception type is exposed.
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=STANDARD_MESSAGES[OutcomeType.UNKNOWN_FAILURE],
            detail=type(exception).__name__,
            suggestion="If this persists, please report the issue.",
        ),
    )
    return finalize_response(response)
