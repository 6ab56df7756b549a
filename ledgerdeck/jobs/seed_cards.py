"""
Seed the ledger with random sample cards.

Creates cards one at a time; index appends are not safe to run
concurrently, so this job never overlaps them.
"""

import argparse
import asyncio
import logging

from ledgerdeck.config import settings
from ledgerdeck.models.failure import KnownError
from ledgerdeck.services.sample_cards import random_card_draft
from ledgerdeck.services.synchronizer import CollectionSynchronizer
from ledgerdeck.store.base import LedgerStore
from ledgerdeck.store.factory import build_store

logger = logging.getLogger(__name__)

DEFAULT_CARD_COUNT = 5


async def run_seed(store: LedgerStore, owner: str, count: int = DEFAULT_CARD_COUNT) -> int:
    """
    Create ``count`` sample cards owned by ``owner``.

    Stops at the first failure.

    Returns:
        Number of cards created
    """
    synchronizer = CollectionSynchronizer(store)
    created = 0

    for _ in range(count):
        try:
            record = await synchronizer.create_record(random_card_draft(owner))
        except KnownError as e:
            logger.error("Card creation failed after %d cards: %s", created, e.message)
            break
        created += 1
        logger.info("Created %s (%s)", record.name, record.id)

    logger.info(
        "Seeding complete. Created %d cards, collection size %d",
        created,
        len(synchronizer.snapshot),
    )
    return created


async def _main(owner: str, count: int) -> int:
    if settings.store_backend == "sql":
        from ledgerdeck.db.database import init_db

        await init_db()
    return await run_seed(build_store(settings), owner, count)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Seed the card ledger with sample cards")
    parser.add_argument("--owner", required=True, help="Owner address for the new cards")
    parser.add_argument("--count", type=int, default=DEFAULT_CARD_COUNT)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(_main(args.owner, args.count))


if __name__ == "__main__":
    main()
