from dataclasses import dataclass
from enum import Enum


class CardStatus(str, Enum):
    """Where a card currently sits."""

    AVAILABLE = "available"
    IN_DECK = "in-deck"
    IN_GAME = "in-game"

    @property
    def label(self) -> str:
        """Human-readable label ("in deck" for ``in-deck``)."""
        return self.value.replace("-", " ")


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    A card stored in the ledger.

    Attributes:
        id: Unique id assigned at creation, also the suffix of the record key
        name: Display name (e.g., "Dragon of Wizard")
        type: Category label (e.g., "Creature", "Spell"); open set
        power: Attack value, >= 0
        defense: Defense value, >= 0
        payload: Opaque encrypted blob, never interpreted here
        created_at: Creation time in epoch seconds
        owner: Address of the identity that created the card
        status: Current status, ``available`` when never set
    """

    id: str
    name: str
    type: str
    power: int
    defense: int
    payload: str
    created_at: int
    owner: str
    status: CardStatus = CardStatus.AVAILABLE


@dataclass(frozen=True, slots=True)
class CardDraft:
    """Caller-supplied fields of a card that has not been written yet."""

    name: str
    type: str
    power: int
    defense: int
    payload: str = ""
    owner: str = ""

    def validation_errors(self) -> list[str]:
        """Return a list of problems; empty when the draft can be written."""
        errors: list[str] = []
        if not self.name.strip():
            errors.append("name must not be empty")
        if not self.type.strip():
            errors.append("type must not be empty")
        if self.power < 0:
            errors.append("power must be >= 0")
        if self.defense < 0:
            errors.append("defense must be >= 0")
        return errors

    def to_record(self, record_id: str, created_at: int) -> CardRecord:
        """Materialize the draft as a freshly created, available card."""
        return CardRecord(
            id=record_id,
            name=self.name,
            type=self.type,
            power=self.power,
            defense=self.defense,
            payload=self.payload,
            created_at=created_at,
            owner=self.owner,
            status=CardStatus.AVAILABLE,
        )
