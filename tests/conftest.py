from datetime import datetime, timedelta, timezone

import pytest

from boosterforge.app import BoosterApp
from boosterforge.config import BoosterForgeConfig
from boosterforge.domain.cards import CardKind, CatalogCard, Rarity


class MutableClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def card(card_id: str, rarity: Rarity | None, kind: CardKind = CardKind.POKEMON) -> CatalogCard:
    return CatalogCard(card_id=card_id, name=card_id.title(), kind=kind, rarity=rarity)


BASE_SET = [
    card("charizard", Rarity.RARE_HOLO),
    card("blastoise", Rarity.RARE_HOLO),
    card("beedrill", Rarity.RARE),
    card("dragonair", Rarity.RARE),
    card("arcanine", Rarity.UNCOMMON),
    card("kadabra", Rarity.UNCOMMON),
    card("wartortle", Rarity.UNCOMMON),
    card("pikachu", Rarity.COMMON),
    card("squirtle", Rarity.COMMON),
    card("bulbasaur", Rarity.COMMON),
    card("potion", Rarity.COMMON, CardKind.TRAINER),
    card("fire-energy", None, CardKind.ENERGY),
    card("water-energy", None, CardKind.ENERGY),
    card("grass-energy", None, CardKind.ENERGY),
]

JUNGLE = [
    card("scyther", Rarity.RARE_HOLO),
    card("flareon", Rarity.RARE),
    card("persian", Rarity.UNCOMMON),
    card("lickitung", Rarity.UNCOMMON),
    card("eevee", Rarity.COMMON),
    card("meowth", Rarity.COMMON),
]


@pytest.fixture()
def clock() -> MutableClock:
    return MutableClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def make_app(clock):
    """Build an app with both test sets registered; kwargs go to BoosterApp."""

    def factory(config: BoosterForgeConfig | None = None, **kwargs) -> BoosterApp:
        config = config or BoosterForgeConfig(bot_token="test", rng_seed=7)
        app = BoosterApp(config, clock=clock, **kwargs)
        app.catalog.register_set("base-set", BASE_SET)
        app.catalog.register_set("jungle", JUNGLE)
        return app

    return factory


@pytest.fixture()
def app(make_app) -> BoosterApp:
    return make_app()
