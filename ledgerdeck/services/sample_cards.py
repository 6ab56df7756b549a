"""
Sample card generator.

Produces random card drafts for demo collections. The payload is an opaque
sealed blob; its contents are never read back by the service.
"""

import base64
import json
import random

from ledgerdeck.models.card import CardDraft

CARD_TYPES = ["Creature", "Spell", "Artifact", "Enchantment"]
CARD_NAMES = ["Dragon", "Wizard", "Warrior", "Beast", "Spirit"]

# Prefix marking payloads sealed by the client
PAYLOAD_PREFIX = "FHE-ENCRYPTED-"

MIN_STAT = 1
MAX_STAT = 10


def sealed_payload(hidden: dict[str, str]) -> str:
    """Wrap hidden card attributes into an opaque payload string."""
    blob = base64.b64encode(json.dumps(hidden).encode("utf-8")).decode("ascii")
    return f"{PAYLOAD_PREFIX}{blob}"


def random_card_draft(owner: str, rng: random.Random | None = None) -> CardDraft:
    """
    Build a random card draft, e.g. "Dragon of Wizard", a Creature with
    power and defense between 1 and 10.
    """
    rng = rng or random.Random()
    return CardDraft(
        name=f"{rng.choice(CARD_NAMES)} of {rng.choice(CARD_NAMES)}",
        type=rng.choice(CARD_TYPES),
        power=rng.randint(MIN_STAT, MAX_STAT),
        defense=rng.randint(MIN_STAT, MAX_STAT),
        payload=sealed_payload(
            {
                "specialAbility": "Hidden until revealed",
                "flavorText": "Encrypted with FHE technology",
            }
        ),
        owner=owner,
    )
