"""Booster pack definitions and the in-process pack registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable, Mapping, Sequence

from .cards import Rarity
from .exceptions import Conflict, NotFound, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SlotSpec:
    """How many cards of a rarity a pack yields, with optional upgrade rolls."""

    rarity: Rarity
    count: int
    holo_chance: float | None = None
    upgrade_chance: float | None = None


@dataclass(frozen=True, slots=True)
class PackDefinition:
    """Declarative composition of a booster pack."""

    pack_id: str
    name: str
    set_id: str
    slots: Sequence[SlotSpec]
    description: str = ""
    image: str = ""
    card_count: int = 0
    price: int | None = None
    available: bool = True

    @property
    def draw_count(self) -> int:
        return sum(slot.count for slot in self.slots)


@dataclass(frozen=True, slots=True)
class PackSummary:
    """Admin-safe projection of a pack used for listings."""

    pack_id: str
    name: str
    description: str
    set_id: str
    image: str
    card_count: int
    price: int
    available: bool

    @classmethod
    def from_definition(cls, pack: PackDefinition) -> "PackSummary":
        return cls(
            pack_id=pack.pack_id,
            name=pack.name,
            description=pack.description,
            set_id=pack.set_id,
            image=pack.image,
            card_count=pack.card_count,
            price=pack.price or 0,
            available=pack.available,
        )


_IMMUTABLE_KEYS = frozenset({"pack_id", "id"})


class PackRegistry:
    """Owns the table of pack definitions for one application instance."""

    def __init__(self, packs: Iterable[PackDefinition] = ()) -> None:
        self._packs: dict[str, PackDefinition] = {}
        for pack in packs:
            self.create(pack)

    def list(self) -> list[PackSummary]:
        return [PackSummary.from_definition(pack) for pack in self._packs.values()]

    def get(self, pack_id: str) -> PackDefinition:
        try:
            return self._packs[pack_id]
        except KeyError as exc:
            raise NotFound(f"Pack '{pack_id}' not found") from exc

    def iter_packs(self) -> Iterable[PackDefinition]:
        return self._packs.values()

    def __contains__(self, pack_id: object) -> bool:
        return pack_id in self._packs

    def create(self, pack: PackDefinition) -> PackDefinition:
        if pack.pack_id in self._packs:
            raise Conflict(f"Pack with ID '{pack.pack_id}' already exists")
        self._packs[pack.pack_id] = pack
        logger.debug("Registered pack '%s' (%s draws).", pack.pack_id, pack.draw_count)
        return pack

    def update(self, pack_id: str, changes: Mapping[str, Any]) -> PackDefinition:
        """Merge ``changes`` into an existing pack; the id never changes."""
        existing = self.get(pack_id)
        allowed = {f.name for f in fields(PackDefinition)} - _IMMUTABLE_KEYS
        updates = {key: value for key, value in changes.items() if key not in _IMMUTABLE_KEYS}
        unknown = sorted(set(updates) - allowed)
        if unknown:
            raise ValidationError(f"Unknown pack fields: {', '.join(unknown)}")
        updated = replace(existing, **updates)
        self._packs[pack_id] = updated
        return updated

    def delete(self, pack_id: str) -> bool:
        return self._packs.pop(pack_id, None) is not None


def default_packs() -> list[PackDefinition]:
    """Packs available out of the box."""
    return [
        PackDefinition(
            pack_id="base-set-booster",
            name="Booster Pack",
            description="Contains 11 random cards from the original Base Set. Includes 1 guaranteed Rare!",
            set_id="base-set",
            image="/packs/booster_chari.png",
            card_count=11,
            slots=(
                SlotSpec(Rarity.RARE, 1, holo_chance=0.33),
                SlotSpec(Rarity.UNCOMMON, 3, upgrade_chance=0.05),
                SlotSpec(Rarity.COMMON, 5),
            ),
            price=200,
        ),
        PackDefinition(
            pack_id="base-set-theme-pack",
            name="Theme Pack",
            description="A smaller pack with 5 cards. Good for quick collection building!",
            set_id="base-set",
            image="/packs/booster_venu.png",
            card_count=5,
            slots=(
                SlotSpec(Rarity.UNCOMMON, 1, holo_chance=0.1),
                SlotSpec(Rarity.COMMON, 4),
            ),
            price=100,
        ),
        PackDefinition(
            pack_id="jungle-booster",
            name="Jungle Booster",
            description="Contains 11 random cards from the Jungle expansion. Includes 1 guaranteed Rare!",
            set_id="jungle",
            image="/packs/jungle/Jungle_Booster_Scyther.webp",
            card_count=11,
            slots=(
                SlotSpec(Rarity.RARE, 1, holo_chance=0.33),
                SlotSpec(Rarity.UNCOMMON, 3, upgrade_chance=0.05),
                SlotSpec(Rarity.COMMON, 5),
            ),
            price=200,
        ),
    ]

