import asyncio

from fastapi import Request

from ledgerdeck.services.synchronizer import CollectionSynchronizer


def get_synchronizer(request: Request) -> CollectionSynchronizer:
    """Synchronizer created by the application lifespan."""
    synchronizer: CollectionSynchronizer = request.app.state.synchronizer
    return synchronizer


def get_create_lock(request: Request) -> asyncio.Lock:
    """
    Lock serializing card creation.

    The index append is a read-modify-write, so two creates interleaving on
    the same store would drop one id.
    """
    lock: asyncio.Lock = request.app.state.create_lock
    return lock
