from random import Random

import pytest

from boosterforge.config import DrawConfig
from boosterforge.domain.cards import CardCatalog, CardKind, CatalogCard, Rarity
from boosterforge.domain.draw import PackDrawEngine, SlotType
from boosterforge.domain.exceptions import NotFound, Unavailable
from boosterforge.domain.packs import PackDefinition, PackRegistry, SlotSpec
from boosterforge.testing import CatalogCardFactory


def _catalog(*cards: CatalogCard, set_id: str = "test-set") -> CardCatalog:
    catalog = CardCatalog(default_energy_set="test-set")
    catalog.register_set(set_id, cards)
    return catalog


def _engine(catalog: CardCatalog, *packs: PackDefinition, standard=()) -> PackDrawEngine:
    return PackDrawEngine(
        catalog,
        PackRegistry(packs),
        DrawConfig(standard_booster_ids=standard),
        rng=Random(42),
    )


def _pack(*slots: SlotSpec, pack_id: str = "test-pack", **kwargs) -> PackDefinition:
    return PackDefinition(pack_id=pack_id, name="Test Pack", set_id="test-set", slots=slots, **kwargs)


@pytest.fixture()
def pool() -> list[CatalogCard]:
    factory = CatalogCardFactory(rng=Random(3))
    return factory.build_set(
        {Rarity.RARE_HOLO: 2, Rarity.RARE: 3, Rarity.UNCOMMON: 4, Rarity.COMMON: 6},
        energy=4,
    )


def test_certain_holo_roll_forces_rare_holo(pool):
    engine = _engine(_catalog(*pool), _pack(SlotSpec(Rarity.RARE, 1, holo_chance=1.0)))
    for _ in range(20):
        (drawn,) = engine.open("test-pack").cards
        assert drawn.slot_type is SlotType.RARE_HOLO
        assert drawn.is_holo
        assert drawn.card.rarity is Rarity.RARE_HOLO


def test_rare_slot_without_holo_roll_draws_from_rare_and_holo_prints(pool):
    engine = _engine(_catalog(*pool), _pack(SlotSpec(Rarity.RARE, 1)))
    seen = set()
    for _ in range(200):
        (drawn,) = engine.open("test-pack").cards
        assert drawn.slot_type is SlotType.RARE
        assert drawn.is_holo == (drawn.card.rarity is Rarity.RARE_HOLO)
        seen.add(drawn.card.rarity)
    assert seen == {Rarity.RARE, Rarity.RARE_HOLO}


def test_zero_holo_chance_with_plain_rares_is_never_holo():
    factory = CatalogCardFactory(rng=Random(5))
    catalog = _catalog(*factory.build_set({Rarity.RARE: 3}))
    engine = _engine(catalog, _pack(SlotSpec(Rarity.RARE, 1, holo_chance=0.0)))
    for _ in range(20):
        (drawn,) = engine.open("test-pack").cards
        assert drawn.slot_type is SlotType.RARE
        assert not drawn.is_holo


def test_certain_upgrade_promotes_uncommon_to_rare(pool):
    engine = _engine(_catalog(*pool), _pack(SlotSpec(Rarity.UNCOMMON, 3, upgrade_chance=1.0)))
    cards = engine.open("test-pack").cards
    assert len(cards) == 3
    for drawn in cards:
        assert drawn.slot_type is SlotType.RARE
        assert drawn.card.rarity in (Rarity.RARE, Rarity.RARE_HOLO)


def test_certain_upgrade_promotes_common_to_uncommon(pool):
    engine = _engine(_catalog(*pool), _pack(SlotSpec(Rarity.COMMON, 5, upgrade_chance=1.0)))
    assert {drawn.slot_type for drawn in engine.open("test-pack").cards} == {SlotType.UNCOMMON}


def test_rare_slot_keeps_holo_when_upgrade_has_no_higher_tier(pool):
    engine = _engine(
        _catalog(*pool),
        _pack(SlotSpec(Rarity.RARE, 1, holo_chance=1.0, upgrade_chance=1.0)),
    )
    (drawn,) = engine.open("test-pack").cards
    assert drawn.card.rarity is Rarity.RARE_HOLO


def test_empty_pool_skips_draws():
    factory = CatalogCardFactory(rng=Random(8))
    catalog = _catalog(*factory.build_set({Rarity.COMMON: 4}))
    engine = _engine(catalog, _pack(SlotSpec(Rarity.UNCOMMON, 3), SlotSpec(Rarity.COMMON, 2)))

    result = engine.open("test-pack")

    assert len(result.cards) == 2
    assert all(drawn.slot_type is SlotType.COMMON for drawn in result.cards)
    assert len(result.skipped) == 3
    assert {(skip.slot_index, skip.rarity) for skip in result.skipped} == {(0, Rarity.UNCOMMON)}


def test_standard_booster_appends_distinct_energy(pool):
    pack = _pack(SlotSpec(Rarity.COMMON, 5), pack_id="booster")
    engine = _engine(_catalog(*pool), pack, standard=("booster",))

    result = engine.open("booster")

    energy = [drawn for drawn in result.cards if drawn.slot_type is SlotType.ENERGY]
    assert len(result.cards) == 7
    assert len(energy) == 2
    assert len({drawn.card.card_id for drawn in energy}) == 2
    assert all(drawn.card.kind is CardKind.ENERGY and not drawn.is_holo for drawn in energy)
    assert result.cards[-2:] == tuple(energy)


def test_energy_falls_back_to_default_set(pool):
    catalog = _catalog(*pool)
    factory = CatalogCardFactory(rng=Random(9))
    catalog.register_set("other", factory.build_set({Rarity.COMMON: 3}, set_id="other"))
    pack = PackDefinition(
        pack_id="other-booster", name="Other", set_id="other", slots=(SlotSpec(Rarity.COMMON, 2),)
    )
    engine = _engine(catalog, pack, standard=("other-booster",))

    energy = [d for d in engine.open("other-booster").cards if d.slot_type is SlotType.ENERGY]

    assert len(energy) == 2
    assert all(drawn.card.card_id.startswith("test-set-energy") for drawn in energy)


def test_energy_pool_smaller_than_quota():
    factory = CatalogCardFactory(rng=Random(10))
    catalog = _catalog(*factory.build_set({Rarity.COMMON: 3}, energy=1))
    engine = _engine(catalog, _pack(SlotSpec(Rarity.COMMON, 1), pack_id="b"), standard=("b",))
    assert len(engine.open("b").cards) == 2


def test_result_never_exceeds_slot_total_plus_energy(pool):
    pack = _pack(
        SlotSpec(Rarity.RARE, 1, holo_chance=0.33),
        SlotSpec(Rarity.UNCOMMON, 3, upgrade_chance=0.05),
        SlotSpec(Rarity.COMMON, 5),
        pack_id="booster",
    )
    engine = _engine(_catalog(*pool), pack, standard=("booster",))
    for _ in range(100):
        assert len(engine.open("booster").cards) <= pack.draw_count + 2


def test_unknown_pack_raises_not_found(pool):
    engine = _engine(_catalog(*pool))
    with pytest.raises(NotFound):
        engine.open("missing")


def test_unavailable_pack_is_refused(pool):
    engine = _engine(_catalog(*pool), _pack(SlotSpec(Rarity.COMMON, 1), available=False))
    with pytest.raises(Unavailable):
        engine.open("test-pack")


def test_seeded_engines_draw_identically(pool):
    pack = _pack(SlotSpec(Rarity.RARE, 1, holo_chance=0.5), SlotSpec(Rarity.COMMON, 5))
    first = _engine(_catalog(*pool), pack).open("test-pack")
    second = _engine(_catalog(*pool), pack).open("test-pack")
    assert [d.card.card_id for d in first.cards] == [d.card.card_id for d in second.cards]
