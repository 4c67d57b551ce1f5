import asyncio

import pytest

from boosterforge.app import BoosterApp
from boosterforge.config import BoosterForgeConfig, DailyLimitConfig
from boosterforge.domain.cards import Rarity
from boosterforge.domain.draw import SlotType
from boosterforge.domain.events import EventRecorder
from boosterforge.domain.exceptions import (
    Conflict,
    DailyLimitReached,
    InsufficientFunds,
    NotFound,
    Unavailable,
)
from boosterforge.domain.packs import PackDefinition, SlotSpec
from boosterforge.storage.memory import InMemoryPlayerStore


class YieldingPlayerStore(InMemoryPlayerStore):
    """Yields to the event loop on every read, like a real database would."""

    async def get_or_create(self, user_id, username=None):
        await asyncio.sleep(0)
        return await super().get_or_create(user_id, username)


def _racy_app(make_app, *, strict: bool) -> BoosterApp:
    config = BoosterForgeConfig(
        bot_token="test", rng_seed=3, daily_limit=DailyLimitConfig(strict=strict)
    )
    return make_app(config, player_store=YieldingPlayerStore())


@pytest.mark.asyncio()
async def test_open_pack_charges_draws_and_collects(app):
    recorder = EventRecorder().attach(app.event_bus, "pack.opened")
    await app.economy.add_coins(1, 1000, "test")

    result = await app.boosters.open_pack(1, "base-set-booster")

    assert result.pack_name == "Booster Pack"
    assert len(result.cards) == 11
    assert sum(1 for drawn in result.cards if drawn.slot_type is SlotType.ENERGY) == 2
    assert result.cards[0].slot_type in (SlotType.RARE, SlotType.RARE_HOLO)
    assert await app.economy.balance(1) == 800

    profile = await app.collection.fetch(1)
    assert sum(profile.cards.values()) == 11
    for drawn in result.cards:
        assert profile.cards[drawn.card.card_id] >= 1

    status = app.boosters.status(1)
    assert status.packs_opened == 1
    assert status.packs_remaining == 4

    (event,) = recorder.events["pack.opened"]
    assert event["price"] == 200
    assert event["cards"] == [drawn.card.card_id for drawn in result.cards]


@pytest.mark.asyncio()
async def test_jungle_booster_uses_base_set_energy(app):
    await app.economy.add_coins(1, 200, "test")
    result = await app.boosters.open_pack(1, "jungle-booster")
    energy = [drawn.card.card_id for drawn in result.cards if drawn.slot_type is SlotType.ENERGY]
    assert len(energy) == 2
    assert set(energy) <= {"fire-energy", "water-energy", "grass-energy"}


@pytest.mark.asyncio()
async def test_theme_pack_has_no_energy(app):
    await app.economy.add_coins(1, 100, "test")
    result = await app.boosters.open_pack(1, "base-set-theme-pack")
    assert len(result.cards) == 5
    assert all(drawn.slot_type is not SlotType.ENERGY for drawn in result.cards)


@pytest.mark.asyncio()
async def test_sixth_open_is_refused_until_next_day(app, clock):
    await app.economy.add_coins(1, 2000, "test")
    for _ in range(5):
        await app.boosters.open_pack(1, "base-set-theme-pack")

    with pytest.raises(DailyLimitReached) as exc_info:
        await app.boosters.open_pack(1, "base-set-theme-pack")
    assert exc_info.value.status_code == 429
    assert exc_info.value.to_payload() == {
        "error": {"message": "Daily pack limit reached. Come back tomorrow!", "code": "DAILY_LIMIT_REACHED"}
    }
    assert await app.economy.balance(1) == 1500

    clock.advance(days=1)
    await app.boosters.open_pack(1, "base-set-theme-pack")
    assert app.boosters.status(1).packs_opened == 1


@pytest.mark.asyncio()
async def test_insufficient_funds_does_not_consume_limit(app):
    with pytest.raises(InsufficientFunds):
        await app.boosters.open_pack(1, "base-set-booster")
    assert app.boosters.status(1).packs_opened == 0
    assert (await app.collection.fetch(1)).cards == {}


@pytest.mark.asyncio()
async def test_strict_mode_releases_slot_on_failed_charge(make_app):
    app = _racy_app(make_app, strict=True)
    with pytest.raises(InsufficientFunds):
        await app.boosters.open_pack(1, "base-set-booster")
    assert app.boosters.status(1).packs_opened == 0


@pytest.mark.asyncio()
async def test_free_pack_skips_charge(app):
    app.packs.create(
        PackDefinition(
            pack_id="promo", name="Promo", set_id="base-set", slots=(SlotSpec(Rarity.COMMON, 2),)
        )
    )
    result = await app.boosters.open_pack(1, "promo")
    assert len(result.cards) == 2
    assert await app.economy.balance(1) == 0


@pytest.mark.asyncio()
async def test_deleted_pack_cannot_be_opened(app):
    app.packs.delete("base-set-booster")
    with pytest.raises(NotFound):
        await app.boosters.open_pack(1, "base-set-booster")


@pytest.mark.asyncio()
async def test_disabled_pack_cannot_be_opened(app):
    await app.economy.add_coins(1, 1000, "test")
    app.packs.update("base-set-booster", {"available": False})
    with pytest.raises(Unavailable):
        await app.boosters.open_pack(1, "base-set-booster")
    assert await app.economy.balance(1) == 1000


def test_duplicate_create_keeps_original(app):
    original = app.packs.get("jungle-booster")
    with pytest.raises(Conflict):
        app.packs.create(
            PackDefinition(pack_id="jungle-booster", name="Other", set_id="jungle", slots=())
        )
    assert app.packs.get("jungle-booster") is original


@pytest.mark.asyncio()
async def test_skipped_draws_are_reported(app):
    recorder = EventRecorder().attach(app.event_bus, "pack.draw.skipped")
    app.packs.create(
        PackDefinition(
            pack_id="fossil-pack", name="Fossil", set_id="fossil", slots=(SlotSpec(Rarity.RARE, 1),)
        )
    )
    result = await app.boosters.open_pack(1, "fossil-pack")
    assert result.cards == ()
    assert recorder.events["pack.draw.skipped"] == [
        {"user_id": 1, "pack_id": "fossil-pack", "slot_index": 0, "rarity": "rare"}
    ]


def test_preview_has_no_side_effects(app):
    result = app.boosters.preview("base-set-booster")
    assert len(result.cards) == 11
    assert app.boosters.status(1).packs_opened == 0


@pytest.mark.asyncio()
async def test_concurrent_opens_may_exceed_soft_cap(make_app):
    app = _racy_app(make_app, strict=False)
    await app.economy.add_coins(1, 5000, "test")
    for _ in range(4):
        await app.boosters.open_pack(1, "base-set-theme-pack")

    results = await asyncio.gather(
        app.boosters.open_pack(1, "base-set-theme-pack"),
        app.boosters.open_pack(1, "base-set-theme-pack"),
    )

    assert len(results) == 2
    assert app.boosters.status(1).packs_opened == 6
    # Only the cap may slip; every charge and every card is kept.
    assert await app.economy.balance(1) == 5000 - 6 * 100
    profile = await app.collection.fetch(1)
    assert sum(profile.cards.values()) == 6 * 5


@pytest.mark.asyncio()
async def test_concurrent_wallet_and_card_writes_are_not_lost(make_app):
    app = _racy_app(make_app, strict=False)

    await asyncio.gather(
        *(app.economy.add_coins(1, 100, "test") for _ in range(5)),
        *(app.collection.add_card(1, "pikachu") for _ in range(3)),
        app.economy.add_coupons(1, 7, "test"),
    )

    assert await app.economy.balance(1) == 500
    profile = await app.collection.fetch(1)
    assert profile.cards == {"pikachu": 3}
    assert profile.wallet == {"coins": 500, "coupons": 7}


@pytest.mark.asyncio()
async def test_strict_cap_holds_under_concurrency(make_app):
    app = _racy_app(make_app, strict=True)
    await app.economy.add_coins(1, 5000, "test")
    for _ in range(4):
        await app.boosters.open_pack(1, "base-set-theme-pack")

    results = await asyncio.gather(
        app.boosters.open_pack(1, "base-set-theme-pack"),
        app.boosters.open_pack(1, "base-set-theme-pack"),
        return_exceptions=True,
    )

    assert sum(isinstance(result, DailyLimitReached) for result in results) == 1
    assert app.boosters.status(1).packs_opened == 5
