"""
Record codec.

Serializes the key index and card records to the byte payloads kept in the
ledger, and back. All wire-format assumptions live in this module.

Wire format is UTF-8 JSON:

- index:  ``["<id>", "<id>", ...]``
- record: ``{"id", "name", "type", "power", "defense", "data", "timestamp",
  "owner", "status"}``; ``status`` is optional and unknown keys are ignored

INVARIANT: decoding never raises. A malformed index decodes to ``[]`` and a
malformed record decodes to a failed ``DecodeResult``; the caller skips it.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter, ValidationError

from ledgerdeck.models.card import CardRecord, CardStatus

logger = logging.getLogger(__name__)

# Reason reported for zero-length record bytes
ABSENT = "absent"

_INDEX_ADAPTER: TypeAdapter[list[str]] = TypeAdapter(list[StrictStr])


class CardPayload(BaseModel):
    """Schema of a stored card record. Strict: no type coercion."""

    model_config = ConfigDict(strict=True, extra="ignore")

    id: str | None = None
    name: str
    type: str
    power: int = Field(ge=0)
    defense: int = Field(ge=0)
    data: str = ""
    timestamp: int
    owner: str = ""
    status: str | None = None


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """Tagged outcome of decoding one record: either ``record`` or ``error``."""

    record: CardRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @property
    def absent(self) -> bool:
        return self.error == ABSENT


def _decode_text(data: bytes) -> str | None:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError:
        return None


# --- Index ---


def encode_index(ids: Sequence[str]) -> bytes:
    """Serialize an ordered sequence of record ids."""
    return json.dumps(list(ids)).encode("utf-8")


def decode_index(data: bytes) -> list[str]:
    """
    Deserialize the key index.

    Empty bytes and malformed bytes both yield an empty list; only the
    latter is logged.
    """
    if not data:
        return []

    text = _decode_text(data)
    if text is None:
        logger.warning("index_decode_failed", extra={"reason": "invalid utf-8"})
        return []

    try:
        return _INDEX_ADAPTER.validate_json(text)
    except ValidationError as e:
        logger.warning(
            "index_decode_failed",
            extra={"reason": e.errors()[0]["msg"] if e.errors() else str(e)},
        )
        return []


# --- Records ---


def encode_record(record: CardRecord) -> bytes:
    """Serialize a card record."""
    payload = {
        "id": record.id,
        "name": record.name,
        "type": record.type,
        "power": record.power,
        "defense": record.defense,
        "data": record.payload,
        "timestamp": record.created_at,
        "owner": record.owner,
        "status": record.status.value,
    }
    return json.dumps(payload).encode("utf-8")


def decode_record(data: bytes, record_id: str | None = None) -> DecodeResult:
    """
    Deserialize a card record.

    Args:
        data: Raw bytes read from the record key
        record_id: Id the record was looked up under. Takes precedence over
            any ``id`` stored in the payload.

    Returns:
        DecodeResult holding the record, or the reason it was rejected.
    """
    if not data:
        return DecodeResult(error=ABSENT)

    text = _decode_text(data)
    if text is None:
        return DecodeResult(error="invalid utf-8")

    try:
        payload = CardPayload.model_validate_json(text)
    except ValidationError as e:
        errors = e.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first["loc"])
            reason = f"{location}: {first['msg']}" if location else first["msg"]
        else:
            reason = str(e)
        return DecodeResult(error=reason)

    resolved_id = record_id if record_id is not None else payload.id
    if not resolved_id:
        return DecodeResult(error="id: missing")

    try:
        status = CardStatus(payload.status) if payload.status else CardStatus.AVAILABLE
    except ValueError:
        return DecodeResult(error=f"status: unknown value {payload.status!r}")

    return DecodeResult(
        record=CardRecord(
            id=resolved_id,
            name=payload.name,
            type=payload.type,
            power=payload.power,
            defense=payload.defense,
            payload=payload.data,
            created_at=payload.timestamp,
            owner=payload.owner,
            status=status,
        )
    )
