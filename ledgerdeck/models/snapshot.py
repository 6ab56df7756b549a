from dataclasses import dataclass, field

from ledgerdeck.models.card import CardRecord


@dataclass(frozen=True)
class CollectionSnapshot:
    """
    Point-in-time materialization of the collection.

    Rebuilt wholesale on every refresh; never patched in place. Records are
    ordered newest first by ``created_at``.

    The ``*_ids`` tuples are diagnostics: index entries dropped during the
    refresh that produced this snapshot.
    """

    records: tuple[CardRecord, ...] = ()
    refreshed_at: float | None = None
    missing_ids: tuple[str, ...] = field(default=())
    """Index entries whose record key held no bytes."""

    malformed_ids: tuple[str, ...] = field(default=())
    """Index entries whose bytes failed to decode."""

    unreadable_ids: tuple[str, ...] = field(default=())
    """Index entries whose read failed at the transport level."""

    @classmethod
    def empty(cls) -> "CollectionSnapshot":
        return cls()

    @property
    def skipped_count(self) -> int:
        return len(self.missing_ids) + len(self.malformed_ids) + len(self.unreadable_ids)

    def __len__(self) -> int:
        return len(self.records)
