"""Pack-open flow: daily gate, coin charge, draw, and collection upsert."""

from __future__ import annotations

import logging

from .collection import CollectionService
from .daily_limits import DailyLimitStatus, DailyLimitTracker
from .draw import PackDrawEngine, PackOpeningResult
from .economy import EconomyService
from .events import EventBus
from .exceptions import DailyLimitReached, Unavailable
from .packs import PackRegistry
from ..config import DailyLimitConfig

logger = logging.getLogger(__name__)

PACK_OPEN_REASON = "pack_open"


class BoosterService:
    """Open packs on behalf of players.

    The coin charge, the draw and the collection writes are not wrapped in a
    transaction: a failure after the charge loses the pack without a refund.
    With the default soft cap, concurrent opens by one player can both pass
    the daily check and exceed the limit by one.
    """

    def __init__(
        self,
        packs: PackRegistry,
        engine: PackDrawEngine,
        limits: DailyLimitTracker,
        economy: EconomyService,
        collection: CollectionService,
        event_bus: EventBus,
        limit_config: DailyLimitConfig,
    ) -> None:
        self._packs = packs
        self._engine = engine
        self._limits = limits
        self._economy = economy
        self._collection = collection
        self._events = event_bus
        self._limit_config = limit_config

    def status(self, user_id: int) -> DailyLimitStatus:
        return self._limits.status(user_id)

    def preview(self, pack_id: str) -> PackOpeningResult:
        """Draw a pack without touching limits, balances or the collection."""
        return self._engine.open(pack_id)

    async def open_pack(self, user_id: int, pack_id: str) -> PackOpeningResult:
        pack = self._packs.get(pack_id)
        if not pack.available:
            raise Unavailable(f"Pack '{pack_id}' is not available")

        strict = self._limit_config.strict
        if strict:
            if not self._limits.try_acquire(user_id):
                raise DailyLimitReached(user_id, self._limits.daily_limit)
        elif not self._limits.status(user_id).can_open:
            raise DailyLimitReached(user_id, self._limits.daily_limit)

        if pack.price:
            try:
                await self._economy.spend_coins(
                    user_id, pack.price, PACK_OPEN_REASON, f"Opened {pack.name}"
                )
            except Exception:
                if strict:
                    self._limits.release(user_id)
                raise

        result = self._engine.open(pack_id)
        if not strict:
            self._limits.record(user_id)

        await self._collection.add_cards(user_id, [drawn.card.card_id for drawn in result.cards])

        for skipped in result.skipped:
            await self._events.publish(
                "pack.draw.skipped",
                {
                    "user_id": user_id,
                    "pack_id": pack_id,
                    "slot_index": skipped.slot_index,
                    "rarity": skipped.rarity.value,
                },
            )
        await self._events.publish(
            "pack.opened",
            {
                "user_id": user_id,
                "pack_id": pack_id,
                "cards": [drawn.card.card_id for drawn in result.cards],
                "price": pack.price or 0,
            },
        )
        logger.info(
            "User %s opened '%s' (%s cards).", user_id, pack_id, len(result.cards)
        )
        return result
