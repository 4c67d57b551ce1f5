from random import Random

import pytest

from boosterforge.config import WheelConfig
from boosterforge.domain.collection import CollectionService
from boosterforge.domain.economy import Currency, EconomyService
from boosterforge.domain.events import EventBus, EventRecorder
from boosterforge.domain.exceptions import InsufficientFunds
from boosterforge.domain.prizes import (
    AvatarPrize,
    CardBackPrize,
    CardPrize,
    CoinsPrize,
    FreePackPrize,
    JackpotPrize,
    NothingPrize,
    SpinAgainPrize,
)
from boosterforge.domain.wheel import PrizeEffect, WheelPrizeResolver, WheelSegment, WheelService
from boosterforge.storage.memory import InMemoryLedgerStore, InMemoryPlayerStore


@pytest.fixture()
def services():
    players = InMemoryPlayerStore()
    economy = EconomyService(players, InMemoryLedgerStore())
    collection = CollectionService(players)
    return economy, collection


@pytest.fixture()
def resolver(services):
    economy, collection = services
    return WheelPrizeResolver(economy, collection, WheelConfig())


def _wheel(services, resolver, bus=None, segments=None, **config):
    economy, _ = services
    kwargs = {"segments": segments} if segments else {}
    return WheelService(
        economy, resolver, WheelConfig(**config), bus or EventBus(), rng=Random(1), **kwargs
    )


@pytest.mark.asyncio()
async def test_jackpot_grants_bonus_then_sub_prizes(services, resolver):
    economy, _ = services
    receipt = await resolver.resolve(1, JackpotPrize(prizes=(CoinsPrize(amount=500),)))

    assert receipt.success
    assert list(receipt.effects) == [
        PrizeEffect("currency", "rare_candy", 1),
        PrizeEffect("currency", "coupons", 100),
        PrizeEffect("currency", "coins", 500),
    ]
    assert await economy.balance(1, Currency.RARE_CANDY) == 1
    assert await economy.balance(1, Currency.COUPONS) == 100
    assert await economy.balance(1, Currency.COINS) == 500


@pytest.mark.asyncio()
async def test_empty_jackpot_still_grants_bonus(services, resolver):
    receipt = await resolver.resolve(1, JackpotPrize())
    assert [effect.target for effect in receipt.effects] == ["rare_candy", "coupons"]


@pytest.mark.asyncio()
@pytest.mark.parametrize("prize", [NothingPrize(), SpinAgainPrize(bonus_coins=10)])
async def test_no_effect_prizes(services, resolver, prize):
    economy, collection = services
    receipt = await resolver.resolve(1, prize)

    assert receipt.effects == ()
    assert await economy.balance(1) == 0
    profile = await collection.fetch(1)
    assert profile.cards == {}
    assert profile.cosmetics == {}


@pytest.mark.asyncio()
async def test_cosmetics_are_granted_once(services, resolver):
    _, collection = services
    first = await resolver.resolve(1, CardBackPrize(card_back_id="pikachu-back"))
    second = await resolver.resolve(1, CardBackPrize(card_back_id="pikachu-back"))

    assert first.effects[0].new is True
    assert second.effects[0].new is False
    profile = await collection.fetch(1)
    assert profile.cosmetics["card_back"] == ("pikachu-back",)


@pytest.mark.asyncio()
async def test_card_prize_increments_quantity(services, resolver):
    _, collection = services
    await resolver.resolve(1, CardPrize("base-set-004"))
    await resolver.resolve(1, CardPrize("base-set-004"))
    assert (await collection.fetch(1)).cards == {"base-set-004": 2}


@pytest.mark.asyncio()
async def test_free_pack_is_worth_coins(services, resolver):
    economy, _ = services
    receipt = await resolver.resolve(1, FreePackPrize())
    assert receipt.effects == (PrizeEffect("currency", "coins", 200),)
    assert await economy.balance(1) == 200


@pytest.mark.asyncio()
async def test_deeply_nested_jackpot_is_cut_off(services):
    economy, collection = services
    resolver = WheelPrizeResolver(economy, collection, WheelConfig(max_jackpot_depth=2))
    prize = JackpotPrize(prizes=(JackpotPrize(prizes=(JackpotPrize(prizes=(AvatarPrize("x"),)),)),))

    receipt = await resolver.resolve(1, prize)

    # Two jackpot levels resolve; the third and its avatar do not.
    assert len(receipt.effects) == 4
    assert await economy.balance(1, Currency.COUPONS) == 200
    assert (await collection.fetch(1)).cosmetics == {}


@pytest.mark.asyncio()
async def test_pay_spin_requires_coins(services, resolver):
    economy, _ = services
    wheel = _wheel(services, resolver)
    with pytest.raises(InsufficientFunds):
        await wheel.spin(1)

    await economy.add_coins(1, 150, "test")
    bus = EventBus()
    recorder = EventRecorder().attach(bus, "wheel.spin.paid")
    wheel = _wheel(services, resolver, bus)
    assert await wheel.pay_spin(1) == 50
    assert recorder.events["wheel.spin.paid"] == [{"user_id": 1, "cost": 100}]


def test_pick_respects_weights(services, resolver):
    segments = (WheelSegment(1, CoinsPrize(amount=5)), WheelSegment(0, NothingPrize()))
    wheel = _wheel(services, resolver, segments=segments)
    assert all(wheel.pick() == CoinsPrize(amount=5) for _ in range(50))


def test_wheel_requires_positive_weight(services, resolver):
    with pytest.raises(ValueError):
        _wheel(services, resolver, segments=(WheelSegment(0, NothingPrize()),))


class ZeroRandom(Random):
    def random(self):
        return 0.0


def test_zero_roll_skips_leading_zero_weight_segment(services, resolver):
    economy, _ = services
    segments = (WheelSegment(0, NothingPrize()), WheelSegment(1, CoinsPrize(amount=5)))
    wheel = WheelService(economy, resolver, WheelConfig(), EventBus(), segments=segments, rng=ZeroRandom())
    assert wheel.pick() == CoinsPrize(amount=5)


def test_wheel_rejects_negative_weight(services, resolver):
    segments = (WheelSegment(-1, NothingPrize()), WheelSegment(5, CoinsPrize(amount=5)))
    with pytest.raises(ValueError):
        _wheel(services, resolver, segments=segments)


@pytest.mark.asyncio()
async def test_spin_and_claim_credits_spin_again_bonus(services, resolver):
    economy, _ = services
    await economy.add_coins(1, 100, "test")
    wheel = _wheel(services, resolver, segments=(WheelSegment(1, SpinAgainPrize(bonus_coins=10)),))

    receipt, bonus = await wheel.spin_and_claim(1)

    assert receipt.effects == ()
    assert bonus == 10
    assert await economy.balance(1) == 10


@pytest.mark.asyncio()
async def test_claim_payload_degrades_and_reports(services, resolver):
    bus = EventBus()
    recorder = EventRecorder().attach(bus, "wheel.prize.degraded", "wheel.prize.claimed")
    wheel = _wheel(services, resolver, bus)

    receipt = await wheel.claim_payload(1, {"type": "card"})

    assert receipt.prize == NothingPrize()
    assert receipt.effects == ()
    assert len(recorder.events["wheel.prize.degraded"]) == 1
    assert recorder.events["wheel.prize.claimed"][0]["prize"] == {"type": "nothing"}


@pytest.mark.asyncio()
async def test_claim_payload_nothing_is_not_degraded(services, resolver):
    bus = EventBus()
    recorder = EventRecorder().attach(bus, "wheel.prize.degraded")
    wheel = _wheel(services, resolver, bus)

    await wheel.claim_payload(1, {"type": "nothing"})

    assert recorder.events["wheel.prize.degraded"] == []
