"""Card collection and cosmetic ownership."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence

from ..storage.base import PlayerRecord, PlayerStore


class CosmeticKind(str, Enum):
    SKIN = "skin"
    CARD_BACK = "card_back"
    COIN = "coin"
    AVATAR = "avatar"


@dataclass(slots=True)
class PlayerProfile:
    user_id: int
    username: str | None
    wallet: Mapping[str, int]
    cards: Mapping[str, int]
    cosmetics: Mapping[str, Sequence[str]]


class CollectionService:
    """Upsert card quantities and unique cosmetic grants.

    Writes hold the store's per-user lock, the same one the economy service
    takes, so card and wallet updates for one player never overwrite each other.
    """

    def __init__(self, store: PlayerStore) -> None:
        self._store = store

    async def fetch(self, user_id: int, username: str | None = None) -> PlayerProfile:
        if username is None:
            record = await self._store.get_or_create(user_id)
        else:
            # Storing a new username is a write.
            async with self._store.lock(user_id):
                record = await self._store.get_or_create(user_id, username)
        return self._to_profile(record)

    async def add_card(self, user_id: int, card_def_id: str, quantity: int = 1) -> int:
        """Increment the owned quantity, creating the entry when absent."""
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        async with self._store.lock(user_id):
            record = await self._store.get_or_create(user_id)
            record.cards[card_def_id] = record.cards.get(card_def_id, 0) + quantity
            await self._store.save(record)
        return record.cards[card_def_id]

    async def add_cards(self, user_id: int, card_def_ids: Sequence[str]) -> None:
        if not card_def_ids:
            return
        async with self._store.lock(user_id):
            record = await self._store.get_or_create(user_id)
            for card_def_id in card_def_ids:
                record.cards[card_def_id] = record.cards.get(card_def_id, 0) + 1
            await self._store.save(record)

    async def grant_cosmetic(self, user_id: int, kind: CosmeticKind, item_id: str) -> bool:
        """Grant a cosmetic once; returns False when it was already owned."""
        async with self._store.lock(user_id):
            record = await self._store.get_or_create(user_id)
            owned = record.cosmetics.setdefault(kind.value, [])
            if item_id in owned:
                return False
            owned.append(item_id)
            await self._store.save(record)
        return True

    def _to_profile(self, record: PlayerRecord) -> PlayerProfile:
        return PlayerProfile(
            user_id=record.user_id,
            username=record.username,
            wallet=dict(record.wallet),
            cards=dict(record.cards),
            cosmetics={kind: tuple(items) for kind, items in record.cosmetics.items()},
        )
