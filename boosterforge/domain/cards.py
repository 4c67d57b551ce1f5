"""Card catalog: the immutable card pool of every set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from .exceptions import Conflict, NotFound


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    RARE_HOLO = "rare-holo"


class CardKind(str, Enum):
    POKEMON = "pokemon"
    TRAINER = "trainer"
    ENERGY = "energy"


@dataclass(frozen=True, slots=True)
class CatalogCard:
    """Reference to a printed card of a set."""

    card_id: str
    name: str
    kind: CardKind = CardKind.POKEMON
    rarity: Rarity | None = None
    energy_type: str | None = None


class CardCatalog:
    """Registry of card sets keyed by set id."""

    def __init__(self, *, default_energy_set: str = "base-set") -> None:
        self._sets: dict[str, tuple[CatalogCard, ...]] = {}
        self._cards: dict[str, CatalogCard] = {}
        self._default_energy_set = default_energy_set

    def register_set(self, set_id: str, cards: Iterable[CatalogCard]) -> None:
        if set_id in self._sets:
            raise Conflict(f"Set '{set_id}' already registered")
        cards = tuple(cards)
        self._sets[set_id] = cards
        for card in cards:
            self._cards[card.card_id] = card

    def set_ids(self) -> list[str]:
        return list(self._sets)

    def has_set(self, set_id: str) -> bool:
        return set_id in self._sets

    def cards_for_set(self, set_id: str) -> Sequence[CatalogCard]:
        return self._sets.get(set_id, ())

    def get_card(self, card_id: str) -> CatalogCard:
        try:
            return self._cards[card_id]
        except KeyError as exc:
            raise NotFound(f"Card '{card_id}' not found") from exc

    def cards_by_rarity(self, set_id: str, rarity: Rarity) -> list[CatalogCard]:
        """Candidate pool for a target rarity.

        A ``rare`` target also accepts ``rare-holo`` prints; a ``rare-holo``
        target only accepts holo prints.
        """
        if rarity is Rarity.RARE:
            accepted = {Rarity.RARE, Rarity.RARE_HOLO}
        else:
            accepted = {rarity}
        return [card for card in self.cards_for_set(set_id) if card.rarity in accepted]

    def energy_cards(self, set_id: str) -> list[CatalogCard]:
        energy = [card for card in self.cards_for_set(set_id) if card.kind is CardKind.ENERGY]
        if energy:
            return energy
        return [
            card
            for card in self.cards_for_set(self._default_energy_set)
            if card.kind is CardKind.ENERGY
        ]
