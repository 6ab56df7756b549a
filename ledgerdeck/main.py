import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledgerdeck.api import cards_router, health_router
from ledgerdeck.config import settings
from ledgerdeck.models.failure import KnownError, create_unknown_failure
from ledgerdeck.services.notifications import error_notification, notification_for_error
from ledgerdeck.services.synchronizer import CollectionSynchronizer
from ledgerdeck.store.factory import build_store

logger = logging.getLogger(__name__)

# Endpoint name -> action named in error notifications
_ACTIONS = {
    "create_card": "Card creation",
    "create_sample_card": "Card creation",
    "refresh_cards": "Refresh",
    "check_availability": "Availability check",
}


def _action_for(request: Request) -> str:
    endpoint = request.scope.get("endpoint")
    return _ACTIONS.get(getattr(endpoint, "__name__", ""), "Request")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Wire the ledger store and load the first snapshot."""
    if settings.store_backend == "sql":
        from ledgerdeck.db.database import init_db

        await init_db()

    synchronizer = CollectionSynchronizer(build_store(settings))
    app.state.synchronizer = synchronizer
    app.state.create_lock = asyncio.Lock()

    try:
        await synchronizer.refresh()
    except KnownError as e:
        # Serve the empty snapshot; clients can retry through /cards/refresh
        logger.error("Initial collection load failed: %s", e.message)
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("ledgerdeck"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(request: Request, exc: KnownError) -> JSONResponse:
    """Classified failure envelope plus a time-bounded error notification."""
    body = exc.to_response().model_dump(mode="json")
    notification = notification_for_error(exc, _action_for(request))
    body["notification"] = notification.model_dump(mode="json")
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(Exception)
async def unknown_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unclassified failure: log it, expose only the exception type."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = create_unknown_failure(exc).model_dump(mode="json")
    body["notification"] = error_notification(
        f"{_action_for(request)} failed unexpectedly"
    ).model_dump(mode="json")
    return JSONResponse(status_code=500, content=body)
