"""Slot-based pack draw engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from random import Random
from typing import Callable, Sequence

from .cards import CardCatalog, CatalogCard, Rarity
from .exceptions import Unavailable
from .packs import PackDefinition, PackRegistry, SlotSpec
from ..config import DrawConfig

logger = logging.getLogger(__name__)


class SlotType(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    RARE_HOLO = "rare-holo"
    ENERGY = "energy"


# One tier up; rare and rare-holo slots are never promoted.
RARITY_UPGRADES = {
    Rarity.UNCOMMON: Rarity.RARE,
    Rarity.COMMON: Rarity.UNCOMMON,
}


@dataclass(frozen=True, slots=True)
class DrawnCard:
    card: CatalogCard
    slot_type: SlotType
    is_holo: bool


@dataclass(frozen=True, slots=True)
class SkippedDraw:
    """A draw that produced no card because its candidate pool was empty."""

    slot_index: int
    rarity: Rarity


@dataclass(frozen=True, slots=True)
class PackOpeningResult:
    pack_id: str
    pack_name: str
    cards: Sequence[DrawnCard]
    opened_at: datetime
    skipped: Sequence[SkippedDraw] = ()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PackDrawEngine:
    """Turn a pack definition into a concrete list of cards.

    Per draw the holo roll is evaluated first and the upgrade roll second; a
    successful upgrade overwrites the target rarity chosen by the holo roll.
    Draws whose pool is empty are skipped, so a result may hold fewer cards
    than the pack's nominal ``card_count``.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        packs: PackRegistry,
        draw_config: DrawConfig,
        *,
        rng: Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._catalog = catalog
        self._packs = packs
        self._config = draw_config
        self._rng = rng or Random()
        self._clock = clock

    def open(self, pack_id: str) -> PackOpeningResult:
        pack = self._packs.get(pack_id)
        if not pack.available:
            raise Unavailable(f"Pack '{pack_id}' is not available")

        cards: list[DrawnCard] = []
        skipped: list[SkippedDraw] = []
        for index, slot in enumerate(pack.slots):
            for _ in range(slot.count):
                drawn = self._draw_slot(pack, slot)
                if isinstance(drawn, Rarity):
                    skipped.append(SkippedDraw(slot_index=index, rarity=drawn))
                    continue
                cards.append(drawn)

        if pack.pack_id in self._config.standard_booster_ids:
            cards.extend(self._draw_energy(pack))

        if skipped:
            logger.warning(
                "Pack '%s' skipped %s draw(s): empty pools for %s in set '%s'.",
                pack.pack_id,
                len(skipped),
                sorted({draw.rarity.value for draw in skipped}),
                pack.set_id,
            )

        return PackOpeningResult(
            pack_id=pack.pack_id,
            pack_name=pack.name,
            cards=tuple(cards),
            opened_at=self._clock(),
            skipped=tuple(skipped),
        )

    def _draw_slot(self, pack: PackDefinition, slot: SlotSpec) -> DrawnCard | Rarity:
        """Return the drawn card, or the target rarity when its pool is empty."""
        target = slot.rarity
        forced_holo = False

        if slot.rarity is Rarity.RARE and slot.holo_chance:
            if self._rng.random() < slot.holo_chance:
                target = Rarity.RARE_HOLO
                forced_holo = True

        if slot.upgrade_chance and self._rng.random() < slot.upgrade_chance:
            target = RARITY_UPGRADES.get(slot.rarity, target)

        pool = self._catalog.cards_by_rarity(pack.set_id, target)
        if not pool:
            return target

        card = self._rng.choice(pool)
        return DrawnCard(
            card=card,
            slot_type=SlotType.RARE_HOLO if forced_holo else SlotType(target.value),
            is_holo=forced_holo or card.rarity is Rarity.RARE_HOLO,
        )

    def _draw_energy(self, pack: PackDefinition) -> list[DrawnCard]:
        pool = self._catalog.energy_cards(pack.set_id)
        picked = self._rng.sample(pool, min(self._config.energy_per_booster, len(pool)))
        return [DrawnCard(card=card, slot_type=SlotType.ENERGY, is_holo=False) for card in picked]
