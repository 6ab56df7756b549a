"""
Health check endpoints.

Provides liveness and readiness checks. Readiness runs the ledger
availability check.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from ledgerdeck.api.deps import get_synchronizer
from ledgerdeck.models.failure import StoreTransportError
from ledgerdeck.services.synchronizer import CollectionSynchronizer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    ledger: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness check.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    synchronizer: Annotated[CollectionSynchronizer, Depends(get_synchronizer)],
) -> HealthResponse:
    """
    Readiness check.

    Returns 503 when the ledger reports itself unavailable or cannot be
    reached.
    """
    try:
        available = await synchronizer.is_available()
    except StoreTransportError as e:
        logger.warning("Readiness check could not reach the ledger: %s", e.detail or e.message)
        available = False

    if available:
        return HealthResponse(status="ready", ledger="available")

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="not ready", ledger="unavailable")
