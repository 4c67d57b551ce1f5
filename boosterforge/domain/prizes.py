"""Wheel prize variants and parsing of claim payloads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Mapping, Sequence, Union

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


class PrizeKind(str, Enum):
    COINS = "coins"
    CARD = "card"
    OVERLAY = "overlay"
    CARD_BACK = "card_back"
    COLLECTIBLE_COIN = "collectible_coin"
    AVATAR = "avatar"
    FREE_PACK = "free_pack"
    SPIN_AGAIN = "spin_again"
    JACKPOT = "jackpot"
    NOTHING = "nothing"


@dataclass(frozen=True, slots=True)
class CoinsPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.COINS
    amount: int


@dataclass(frozen=True, slots=True)
class CardPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.CARD
    card_def_id: str


@dataclass(frozen=True, slots=True)
class OverlayPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.OVERLAY
    skin_id: str
    overlay_id: str | None = None


@dataclass(frozen=True, slots=True)
class CardBackPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.CARD_BACK
    card_back_id: str


@dataclass(frozen=True, slots=True)
class CollectibleCoinPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.COLLECTIBLE_COIN
    coin_id: str


@dataclass(frozen=True, slots=True)
class AvatarPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.AVATAR
    avatar_id: str


@dataclass(frozen=True, slots=True)
class FreePackPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.FREE_PACK


@dataclass(frozen=True, slots=True)
class SpinAgainPrize:
    """Re-spin; ``bonus_coins`` is credited by the caller, never by the resolver.

    See :meth:`WheelService.spin_and_claim`.
    """

    kind: ClassVar[PrizeKind] = PrizeKind.SPIN_AGAIN
    bonus_coins: int = 0


@dataclass(frozen=True, slots=True)
class JackpotPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.JACKPOT
    prizes: Sequence["ResolvedPrize"] = ()


@dataclass(frozen=True, slots=True)
class NothingPrize:
    kind: ClassVar[PrizeKind] = PrizeKind.NOTHING


ResolvedPrize = Union[
    CoinsPrize,
    CardPrize,
    OverlayPrize,
    CardBackPrize,
    CollectibleCoinPrize,
    AvatarPrize,
    FreePackPrize,
    SpinAgainPrize,
    JackpotPrize,
    NothingPrize,
]


def parse_prize(payload: Mapping[str, Any], *, strict: bool = False) -> ResolvedPrize:
    """Build a prize from a JSON claim payload.

    Payloads missing a field their kind requires (or carrying an unknown
    ``type``) raise :class:`ValidationError` when ``strict``; otherwise they
    degrade to :class:`NothingPrize` with a warning.
    """
    try:
        return _parse(payload, strict=strict)
    except ValidationError:
        if strict:
            raise
        logger.warning("Malformed wheel prize treated as nothing: %r", payload)
        return NothingPrize()


def prize_to_dict(prize: ResolvedPrize) -> dict[str, Any]:
    """Inverse of :func:`parse_prize` using the camelCase wire names."""
    data: dict[str, Any] = {"type": prize.kind.value}
    if isinstance(prize, JackpotPrize):
        data["prizes"] = [prize_to_dict(sub) for sub in prize.prizes]
        return data
    for attr, wire_name in _WIRE_FIELDS.get(prize.kind, ()):
        value = getattr(prize, attr)
        if value is not None:
            data[wire_name] = value
    return data


_WIRE_FIELDS: dict[PrizeKind, tuple[tuple[str, str], ...]] = {
    PrizeKind.COINS: (("amount", "amount"),),
    PrizeKind.CARD: (("card_def_id", "cardDefId"),),
    PrizeKind.OVERLAY: (("skin_id", "skinId"), ("overlay_id", "overlayId")),
    PrizeKind.CARD_BACK: (("card_back_id", "cardBackId"),),
    PrizeKind.COLLECTIBLE_COIN: (("coin_id", "coinId"),),
    PrizeKind.AVATAR: (("avatar_id", "avatarId"),),
    PrizeKind.SPIN_AGAIN: (("bonus_coins", "bonusCoins"),),
}


def _parse(payload: Mapping[str, Any], *, strict: bool) -> ResolvedPrize:
    if not isinstance(payload, Mapping):
        raise ValidationError("Prize must be an object")
    try:
        kind = PrizeKind(payload.get("type"))
    except ValueError as exc:
        raise ValidationError(f"Unknown prize type {payload.get('type')!r}") from exc

    builder = _BUILDERS.get(kind)
    if builder is not None:
        return builder(payload)
    if kind is PrizeKind.JACKPOT:
        sub_prizes = payload.get("prizes")
        # An empty list is still a jackpot: the bonus currencies are granted.
        if not isinstance(sub_prizes, list):
            raise ValidationError("Prize 'jackpot' requires 'prizes'")
        return JackpotPrize(prizes=tuple(parse_prize(sub, strict=strict) for sub in sub_prizes))
    if kind is PrizeKind.FREE_PACK:
        return FreePackPrize()
    if kind is PrizeKind.SPIN_AGAIN:
        return SpinAgainPrize(bonus_coins=_optional_int(payload, "bonusCoins"))
    return NothingPrize()


def _required(payload: Mapping[str, Any], name: str, expected: type | tuple[type, ...]) -> Any:
    value = payload.get(name)
    if isinstance(value, bool) or not isinstance(value, expected) or not value:
        raise ValidationError(f"Prize '{payload.get('type')}' requires '{name}'")
    return value


def _optional_int(payload: Mapping[str, Any], name: str) -> int:
    value = payload.get(name, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Prize '{payload.get('type')}' has invalid '{name}'")
    return int(value)


_BUILDERS: dict[PrizeKind, Callable[[Mapping[str, Any]], ResolvedPrize]] = {
    PrizeKind.COINS: lambda p: CoinsPrize(amount=int(_required(p, "amount", (int, float)))),
    PrizeKind.CARD: lambda p: CardPrize(card_def_id=_required(p, "cardDefId", str)),
    PrizeKind.OVERLAY: lambda p: OverlayPrize(
        skin_id=_required(p, "skinId", str), overlay_id=p.get("overlayId")
    ),
    PrizeKind.CARD_BACK: lambda p: CardBackPrize(card_back_id=_required(p, "cardBackId", str)),
    PrizeKind.COLLECTIBLE_COIN: lambda p: CollectibleCoinPrize(coin_id=_required(p, "coinId", str)),
    PrizeKind.AVATAR: lambda p: AvatarPrize(avatar_id=_required(p, "avatarId", str)),
}
