"""
Card API endpoints.

Lists, inspects and creates cards. Listing and stats are served from the
current snapshot; only refresh and create touch the ledger.
"""

import asyncio
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from ledgerdeck.api.deps import get_create_lock, get_synchronizer
from ledgerdeck.models.card import CardDraft, CardRecord, CardStatus
from ledgerdeck.models.failure import InvalidCardError
from ledgerdeck.models.snapshot import CollectionSnapshot
from ledgerdeck.services.collection_view import (
    CollectionStats,
    filter_records,
    find_record,
    short_owner,
    summarize,
)
from ledgerdeck.services.notifications import Notification, success_notification
from ledgerdeck.services.sample_cards import random_card_draft
from ledgerdeck.services.synchronizer import CollectionSynchronizer

router = APIRouter(prefix="/cards", tags=["cards"])

StatusQuery = Literal["all", "available", "in-deck", "in-game"]


class CardResponse(BaseModel):
    """A card as shown to clients."""

    id: str
    name: str
    type: str
    power: int
    defense: int
    payload: str
    created_at: int
    owner: str
    owner_short: str
    status: CardStatus
    status_label: str

    @classmethod
    def from_record(cls, record: CardRecord) -> "CardResponse":
        return cls(
            id=record.id,
            name=record.name,
            type=record.type,
            power=record.power,
            defense=record.defense,
            payload=record.payload,
            created_at=record.created_at,
            owner=record.owner,
            owner_short=short_owner(record.owner),
            status=record.status,
            status_label=record.status.label,
        )


class StatsResponse(BaseModel):
    """Counts and percentage distribution by status."""

    total: int = 0
    counts: dict[str, int] = Field(default_factory=dict)
    percentages: dict[str, float] = Field(default_factory=dict)

    @classmethod
    def from_stats(cls, stats: CollectionStats) -> "StatsResponse":
        return cls(
            total=stats.total,
            counts={s.value: n for s, n in stats.counts.items()},
            percentages={s.value: p for s, p in stats.percentages.items()},
        )


class CardListResponse(BaseModel):
    """Filtered cards plus stats of the whole snapshot."""

    cards: list[CardResponse] = Field(default_factory=list)
    matches: int = 0
    stats: StatsResponse
    refreshed_at: float | None = None


class RefreshResponse(BaseModel):
    """Result of a snapshot refresh."""

    stats: StatsResponse
    refreshed_at: float | None = None
    skipped: int = Field(
        default=0,
        description="Index entries dropped because they were missing, malformed or unreadable",
    )


class CardCreateRequest(BaseModel):
    """Request model for creating a card."""

    name: str = Field(..., min_length=1, examples=["Dragon"])
    type: str = Field(..., min_length=1, examples=["Creature"])
    power: int = Field(..., ge=0, examples=[5])
    defense: int = Field(..., ge=0, examples=[3])
    payload: str = Field(default="", description="Opaque encrypted card data")
    owner: str = Field(..., description="Address of the creating wallet")


class SampleCardRequest(BaseModel):
    """Request model for generating a random card."""

    owner: str = Field(..., description="Address of the creating wallet")


class CreateCardResponse(BaseModel):
    card: CardResponse
    notification: Notification


class AvailabilityResponse(BaseModel):
    available: bool
    notification: Notification


def _list_response(snapshot: CollectionSnapshot, matches: list[CardRecord]) -> CardListResponse:
    return CardListResponse(
        cards=[CardResponse.from_record(r) for r in matches],
        matches=len(matches),
        stats=StatsResponse.from_stats(summarize(snapshot.records)),
        refreshed_at=snapshot.refreshed_at,
    )


@router.get("", response_model=CardListResponse)
async def list_cards(
    synchronizer: Annotated[CollectionSynchronizer, Depends(get_synchronizer)],
    q: Annotated[str, Query(description="Case-insensitive match on name or type")] = "",
    card_status: Annotated[StatusQuery, Query(alias="status")] = "all",
) -> CardListResponse:
    """
    List cards from the current snapshot.

    Does not contact the ledger; call POST /cards/refresh to reload.
    """
    snapshot = synchronizer.snapshot
    return _list_response(snapshot, filter_records(snapshot.records, q, card_status))


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    synchronizer: Annotated[CollectionSynchronizer, Depends(get_synchronizer)],
) -> StatsResponse:
    """Counts and percentages by status for the current snapshot."""
    return StatsResponse.from_stats(summarize(synchronizer.snapshot.records))


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    synchronizer: Annotated[CollectionSynchronizer, Depends(get_synchronizer)],
) -> AvailabilityResponse:
    """Run the ledger availability check."""
    available = await synchronizer.is_available()
    return AvailabilityResponse(
        available=available,
        notification=success_notification(
            f"Ledger is {'available' if available else 'unavailable'}"
        ),
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_cards(
    synchronizer: Annotated[CollectionSynchronizer, Depends(get_synchronizer)],
) -> RefreshResponse:
    """Reload the whole collection from the ledger."""
    snapshot = await synchronizer.refresh()
    return RefreshResponse(
        stats=StatsResponse.from_stats(summarize(snapshot.records)),
        refreshed_at=snapshot.refreshed_at,
        skipped=snapshot.skipped_count,
    )


@router.post("", response_model=CreateCardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    request: CardCreateRequest,
    synchronizer: Annotated[CollectionSynchronizer, Depends(get_synchronizer)],
    create_lock: Annotated[asyncio.Lock, Depends(get_create_lock)],
) -> CreateCardResponse:
    """
    Create a card.

    Writes the record, appends it to the index, then refreshes. Creates are
    serialized so concurrent requests cannot lose an index append.
    """
    if not request.owner.strip():
        raise InvalidCardError("Please connect wallet first")

    draft = CardDraft(
        name=request.name,
        type=request.type,
        power=request.power,
        defense=request.defense,
        payload=request.payload,
        owner=request.owner,
    )
    async with create_lock:
        record = await synchronizer.create_record(draft)
    return CreateCardResponse(
        card=CardResponse.from_record(record),
        notification=success_notification("Encrypted card created successfully!"),
    )


@router.post("/sample", response_model=CreateCardResponse, status_code=status.HTTP_201_CREATED)
async def create_sample_card(
    request: SampleCardRequest,
    synchronizer: Annotated[CollectionSynchronizer, Depends(get_synchronizer)],
    create_lock: Annotated[asyncio.Lock, Depends(get_create_lock)],
) -> CreateCardResponse:
    """Generate and create a random card for the given owner."""
    if not request.owner.strip():
        raise InvalidCardError("Please connect wallet first")

    async with create_lock:
        record = await synchronizer.create_record(random_card_draft(request.owner))
    return CreateCardResponse(
        card=CardResponse.from_record(record),
        notification=success_notification("Encrypted card created successfully!"),
    )


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: str,
    synchronizer: Annotated[CollectionSynchronizer, Depends(get_synchronizer)],
) -> CardResponse:
    """Card detail from the current snapshot."""
    record = find_record(synchronizer.snapshot.records, card_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card {card_id} not found",
        )
    return CardResponse.from_record(record)
