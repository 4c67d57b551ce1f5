"""Prize wheel: paying for spins, picking outcomes, and claiming prizes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Any, Mapping, Sequence

from .collection import CollectionService, CosmeticKind
from .economy import Currency, EconomyService
from .events import EventBus
from .prizes import (
    AvatarPrize,
    CardBackPrize,
    CardPrize,
    CoinsPrize,
    CollectibleCoinPrize,
    FreePackPrize,
    JackpotPrize,
    NothingPrize,
    OverlayPrize,
    PrizeKind,
    ResolvedPrize,
    SpinAgainPrize,
    parse_prize,
    prize_to_dict,
)
from ..config import WheelConfig

logger = logging.getLogger(__name__)

WHEEL_REASON = "wheel_spin"


@dataclass(frozen=True, slots=True)
class PrizeEffect:
    """One persisted change caused by claiming a prize."""

    effect: str
    target: str
    amount: int = 1
    new: bool = True


@dataclass(frozen=True, slots=True)
class ClaimReceipt:
    prize: ResolvedPrize
    effects: Sequence[PrizeEffect]
    success: bool = True


@dataclass(frozen=True, slots=True)
class WheelSegment:
    weight: float
    prize: ResolvedPrize


DEFAULT_SEGMENTS: tuple[WheelSegment, ...] = (
    WheelSegment(30, CoinsPrize(amount=50)),
    WheelSegment(15, CoinsPrize(amount=150)),
    WheelSegment(20, NothingPrize()),
    WheelSegment(10, SpinAgainPrize(bonus_coins=10)),
    WheelSegment(8, FreePackPrize()),
    WheelSegment(2, JackpotPrize(prizes=(CoinsPrize(amount=500),))),
)


class WheelPrizeResolver:
    """Persist the effects of an already-selected prize.

    Every well-formed prize resolves without raising. Jackpots nested deeper
    than ``max_jackpot_depth`` are not resolved.
    """

    def __init__(
        self,
        economy: EconomyService,
        collection: CollectionService,
        wheel_config: WheelConfig,
    ) -> None:
        self._economy = economy
        self._collection = collection
        self._config = wheel_config

    async def resolve(self, user_id: int, prize: ResolvedPrize) -> ClaimReceipt:
        effects: list[PrizeEffect] = []
        await self._resolve(user_id, prize, 0, effects)
        return ClaimReceipt(prize=prize, effects=tuple(effects))

    async def _resolve(
        self, user_id: int, prize: ResolvedPrize, depth: int, effects: list[PrizeEffect]
    ) -> None:
        if isinstance(prize, CoinsPrize):
            if not prize.amount:
                logger.warning("Coins prize for user %s has no amount; skipped.", user_id)
                return
            await self._economy.add_coins(
                user_id, prize.amount, WHEEL_REASON, f"Wheel: +{prize.amount} coins"
            )
            effects.append(PrizeEffect("currency", Currency.COINS.value, prize.amount))
        elif isinstance(prize, CardPrize):
            await self._collection.add_card(user_id, prize.card_def_id)
            effects.append(PrizeEffect("card", prize.card_def_id))
        elif isinstance(prize, OverlayPrize):
            await self._grant(user_id, CosmeticKind.SKIN, prize.skin_id, effects)
        elif isinstance(prize, CardBackPrize):
            await self._grant(user_id, CosmeticKind.CARD_BACK, prize.card_back_id, effects)
        elif isinstance(prize, CollectibleCoinPrize):
            await self._grant(user_id, CosmeticKind.COIN, prize.coin_id, effects)
        elif isinstance(prize, AvatarPrize):
            await self._grant(user_id, CosmeticKind.AVATAR, prize.avatar_id, effects)
        elif isinstance(prize, FreePackPrize):
            amount = self._config.free_pack_coins
            await self._economy.add_coins(
                user_id, amount, WHEEL_REASON, "Wheel: free pack (coin equivalent)"
            )
            effects.append(PrizeEffect("currency", Currency.COINS.value, amount))
        elif isinstance(prize, JackpotPrize):
            await self._resolve_jackpot(user_id, prize, depth, effects)
        # SpinAgainPrize and NothingPrize have no persistent effect.

    async def _resolve_jackpot(
        self, user_id: int, prize: JackpotPrize, depth: int, effects: list[PrizeEffect]
    ) -> None:
        if depth >= self._config.max_jackpot_depth:
            logger.warning(
                "Jackpot for user %s nested deeper than %s levels; not resolved.",
                user_id,
                self._config.max_jackpot_depth,
            )
            return
        candy = self._config.jackpot_rare_candy
        coupons = self._config.jackpot_coupons
        await self._economy.add_rare_candy(user_id, candy, WHEEL_REASON, "Wheel: jackpot rare candy")
        effects.append(PrizeEffect("currency", Currency.RARE_CANDY.value, candy))
        await self._economy.add_coupons(
            user_id, coupons, WHEEL_REASON, f"Wheel: jackpot {coupons} coupons"
        )
        effects.append(PrizeEffect("currency", Currency.COUPONS.value, coupons))
        for sub_prize in prize.prizes:
            await self._resolve(user_id, sub_prize, depth + 1, effects)

    async def _grant(
        self, user_id: int, kind: CosmeticKind, item_id: str, effects: list[PrizeEffect]
    ) -> None:
        created = await self._collection.grant_cosmetic(user_id, kind, item_id)
        effects.append(PrizeEffect("cosmetic", f"{kind.value}:{item_id}", new=created))


class WheelService:
    """Spin payment, outcome selection and claiming.

    A spin is paid before its outcome exists, and claiming is a separate call.
    """

    def __init__(
        self,
        economy: EconomyService,
        resolver: WheelPrizeResolver,
        wheel_config: WheelConfig,
        event_bus: EventBus,
        *,
        segments: Sequence[WheelSegment] = DEFAULT_SEGMENTS,
        rng: Random | None = None,
    ) -> None:
        if any(segment.weight < 0 for segment in segments):
            raise ValueError("Wheel segment weights cannot be negative")
        if not segments or sum(segment.weight for segment in segments) <= 0:
            raise ValueError("Wheel needs at least one segment with positive weight")
        self._economy = economy
        self._resolver = resolver
        self._config = wheel_config
        self._events = event_bus
        self._segments = tuple(segments)
        self._rng = rng or Random()

    @property
    def segments(self) -> Sequence[WheelSegment]:
        return self._segments

    async def pay_spin(self, user_id: int) -> int:
        balance = await self._economy.spend_coins(
            user_id, self._config.spin_cost, WHEEL_REASON, "Wheel spin"
        )
        await self._events.publish(
            "wheel.spin.paid", {"user_id": user_id, "cost": self._config.spin_cost}
        )
        return balance

    def pick(self) -> ResolvedPrize:
        total = sum(segment.weight for segment in self._segments)
        threshold = self._rng.random() * total
        cumulative = 0.0
        for segment in self._segments:
            cumulative += segment.weight
            if threshold < cumulative:
                return segment.prize
        # Float rounding can leave the threshold at the total.
        return next(segment.prize for segment in reversed(self._segments) if segment.weight > 0)

    async def spin(self, user_id: int) -> ResolvedPrize:
        await self.pay_spin(user_id)
        return self.pick()

    async def claim(self, user_id: int, prize: ResolvedPrize) -> ClaimReceipt:
        receipt = await self._resolver.resolve(user_id, prize)
        await self._events.publish(
            "wheel.prize.claimed",
            {
                "user_id": user_id,
                "prize": prize_to_dict(prize),
                "effects": len(receipt.effects),
            },
        )
        logger.info("User %s claimed %s (%s effects).", user_id, prize.kind.value, len(receipt.effects))
        return receipt

    async def spin_and_claim(self, user_id: int) -> tuple[ClaimReceipt, int]:
        """Pay, pick and claim in one call for clients without a spin animation.

        Returns the receipt and the spin-again bonus credited on top of it.
        """
        prize = await self.spin(user_id)
        receipt = await self.claim(user_id, prize)
        bonus = 0
        if isinstance(prize, SpinAgainPrize) and prize.bonus_coins > 0:
            bonus = prize.bonus_coins
            await self._economy.add_coins(user_id, bonus, WHEEL_REASON, "Wheel: spin again bonus")
        return receipt, bonus

    async def claim_payload(self, user_id: int, payload: Mapping[str, Any]) -> ClaimReceipt:
        """Claim a prize received as JSON, degrading malformed payloads to nothing."""
        prize = parse_prize(payload)
        requested = payload.get("type") if isinstance(payload, Mapping) else None
        if isinstance(prize, NothingPrize) and requested != PrizeKind.NOTHING.value:
            await self._events.publish(
                "wheel.prize.degraded", {"user_id": user_id, "payload": payload}
            )
        return await self.claim(user_id, prize)
