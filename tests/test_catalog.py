import pytest

from boosterforge.domain.cards import CardCatalog, CardKind, CatalogCard, Rarity
from boosterforge.domain.exceptions import Conflict, NotFound


def _catalog() -> CardCatalog:
    catalog = CardCatalog()
    catalog.register_set(
        "base-set",
        [
            CatalogCard("charizard", "Charizard", rarity=Rarity.RARE_HOLO),
            CatalogCard("beedrill", "Beedrill", rarity=Rarity.RARE),
            CatalogCard("pikachu", "Pikachu", rarity=Rarity.COMMON),
            CatalogCard("fire", "Fire Energy", kind=CardKind.ENERGY, energy_type="fire"),
        ],
    )
    catalog.register_set("jungle", [CatalogCard("eevee", "Eevee", rarity=Rarity.COMMON)])
    return catalog


def test_rare_pool_includes_holo_prints():
    catalog = _catalog()
    rares = {card.card_id for card in catalog.cards_by_rarity("base-set", Rarity.RARE)}
    assert rares == {"charizard", "beedrill"}
    holos = {card.card_id for card in catalog.cards_by_rarity("base-set", Rarity.RARE_HOLO)}
    assert holos == {"charizard"}


def test_unknown_set_has_empty_pools():
    catalog = _catalog()
    assert catalog.cards_for_set("fossil") == ()
    assert catalog.cards_by_rarity("fossil", Rarity.COMMON) == []


def test_energy_falls_back_to_base_set():
    catalog = _catalog()
    assert [card.card_id for card in catalog.energy_cards("jungle")] == ["fire"]


def test_get_card_and_duplicate_set():
    catalog = _catalog()
    assert catalog.get_card("eevee").name == "Eevee"
    with pytest.raises(NotFound):
        catalog.get_card("mew")
    with pytest.raises(Conflict):
        catalog.register_set("jungle", [])
