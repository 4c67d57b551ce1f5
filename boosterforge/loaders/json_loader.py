"""Load card sets and pack definitions from JSON, and parse admin pack payloads."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, TYPE_CHECKING

from ..domain.cards import CardKind, CatalogCard, Rarity
from ..domain.exceptions import ValidationError
from ..domain.packs import PackDefinition, SlotSpec

if TYPE_CHECKING:
    from ..app import BoosterApp

logger = logging.getLogger(__name__)

# camelCase wire name -> PackDefinition field
_PACK_FIELDS = {
    "name": "name",
    "description": "description",
    "setId": "set_id",
    "image": "image",
    "cardCount": "card_count",
    "slots": "slots",
    "price": "price",
    "available": "available",
}
_REQUIRED_PACK_FIELDS = ("id", "name", "setId", "slots")


@dataclass(slots=True)
class CatalogDefinition:
    sets: Mapping[str, Sequence[CatalogCard]]
    packs: Sequence[PackDefinition]


def load_catalog_from_json(app: "BoosterApp", path: str | Path) -> CatalogDefinition:
    """Load card sets and packs from a JSON file and register them on the app.

    Packs from the file replace seeded packs with the same id.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    definition = parse_catalog_dict(data)
    for set_id, cards in definition.sets.items():
        app.catalog.register_set(set_id, cards)
    for pack in definition.packs:
        if app.packs.delete(pack.pack_id):
            logger.debug("Pack '%s' from %s replaces the seeded definition.", pack.pack_id, path)
        app.packs.create(pack)
    return definition


def parse_catalog_dict(data: dict[str, Any]) -> CatalogDefinition:
    """Parse a JSON dict (already decoded) into domain objects."""
    errors = validate_catalog_dict(data)
    if errors:
        raise ValidationError(_format_errors("Catalog validation failed", errors))
    sets = {entry["id"]: tuple(parse_card(card) for card in entry["cards"]) for entry in data["sets"]}
    packs = tuple(parse_pack_payload(entry) for entry in data.get("packs", []))
    return CatalogDefinition(sets=sets, packs=packs)


def parse_card(entry: dict[str, Any]) -> CatalogCard:
    rarity = entry.get("rarity")
    return CatalogCard(
        card_id=entry["id"],
        name=entry["name"],
        kind=CardKind(entry.get("kind", CardKind.POKEMON.value)),
        rarity=Rarity(rarity) if rarity else None,
        energy_type=entry.get("energyType"),
    )


def parse_pack_payload(entry: Mapping[str, Any]) -> PackDefinition:
    """Build a pack from an admin payload; raises ValidationError when malformed."""
    if not isinstance(entry, Mapping):
        raise ValidationError("Pack payload must be an object")
    missing = [name for name in _REQUIRED_PACK_FIELDS if not entry.get(name)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    changes = parse_pack_patch({k: v for k, v in entry.items() if k != "id"})
    return PackDefinition(pack_id=str(entry["id"]), **changes)


def parse_pack_patch(entry: Mapping[str, Any]) -> dict[str, Any]:
    """Translate a partial camelCase payload into PackDefinition field updates.

    ``id`` is dropped; the registry never changes a pack's id.
    """
    changes: dict[str, Any] = {}
    errors: list[str] = []
    for key, value in entry.items():
        if key in ("id", "packId"):
            continue
        field_name = _PACK_FIELDS.get(key)
        if field_name is None:
            errors.append(f"Unknown pack field '{key}'.")
            continue
        if field_name == "slots":
            changes["slots"] = _parse_slots(value, errors)
        elif field_name in ("card_count", "price"):
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                errors.append(f"'{key}' must be a non-negative integer.")
            changes[field_name] = value
        elif field_name == "available":
            if not isinstance(value, bool):
                errors.append("'available' must be a boolean.")
            changes[field_name] = value
        else:
            if not isinstance(value, str):
                errors.append(f"'{key}' must be a string.")
            changes[field_name] = value
    if errors:
        raise ValidationError(_format_errors("Invalid pack payload", errors))
    return changes


def pack_to_dict(pack: PackDefinition) -> dict[str, Any]:
    return {
        "id": pack.pack_id,
        "name": pack.name,
        "description": pack.description,
        "setId": pack.set_id,
        "image": pack.image,
        "cardCount": pack.card_count,
        "slots": [_slot_to_dict(slot) for slot in pack.slots],
        "price": pack.price,
        "available": pack.available,
    }


def _slot_to_dict(slot: SlotSpec) -> dict[str, Any]:
    data: dict[str, Any] = {"rarity": slot.rarity.value, "count": slot.count}
    if slot.holo_chance is not None:
        data["holoChance"] = slot.holo_chance
    if slot.upgrade_chance is not None:
        data["upgradeChance"] = slot.upgrade_chance
    return data


def _parse_slots(value: Any, errors: list[str]) -> tuple[SlotSpec, ...]:
    if not isinstance(value, list) or not value:
        errors.append("'slots' must be a non-empty array.")
        return ()
    slots: list[SlotSpec] = []
    for idx, raw in enumerate(value, start=1):
        if not isinstance(raw, Mapping):
            errors.append(f"Slot #{idx} must be an object.")
            continue
        try:
            rarity = Rarity(raw.get("rarity"))
        except ValueError:
            errors.append(f"Slot #{idx} has invalid rarity '{raw.get('rarity')}'.")
            continue
        count = raw.get("count")
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            errors.append(f"Slot #{idx} must define a positive integer 'count'.")
            continue
        slots.append(
            SlotSpec(
                rarity=rarity,
                count=count,
                holo_chance=_probability(raw.get("holoChance"), f"Slot #{idx} holoChance", errors),
                upgrade_chance=_probability(
                    raw.get("upgradeChance"), f"Slot #{idx} upgradeChance", errors
                ),
            )
        )
    return tuple(slots)


def _probability(value: Any, label: str, errors: list[str]) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(f"{label} must be a number.")
        return None
    if not 0.0 <= float(value) <= 1.0:
        errors.append(f"{label} must be between 0 and 1.")
        return None
    return float(value)


def validate_catalog_file(path: str | Path) -> list[str]:
    """Validate catalog JSON file and return a list of errors."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return validate_catalog_dict(data)


def validate_catalog_dict(data: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    sets_raw = data.get("sets")
    set_ids: set[str] = set()
    if not isinstance(sets_raw, list) or not sets_raw:
        errors.append("Catalog must contain non-empty 'sets' array.")
    else:
        card_ids: set[str] = set()
        for idx, entry in enumerate(sets_raw, start=1):
            if not isinstance(entry, dict):
                errors.append(f"Set #{idx} must be an object.")
                continue
            set_id = entry.get("id")
            if not isinstance(set_id, str) or not set_id.strip():
                errors.append(f"Set #{idx} must define non-empty 'id'.")
                continue
            if set_id in set_ids:
                errors.append(f"Set id '{set_id}' defined multiple times.")
            set_ids.add(set_id)
            cards = entry.get("cards")
            if not isinstance(cards, list):
                errors.append(f"Set '{set_id}' must define a 'cards' array.")
                continue
            for card in cards:
                errors.extend(_validate_card(set_id, card, card_ids))

    packs_raw = data.get("packs", [])
    if not isinstance(packs_raw, list):
        errors.append("'packs' must be an array.")
        return errors
    pack_ids: set[str] = set()
    for idx, entry in enumerate(packs_raw, start=1):
        try:
            pack = parse_pack_payload(entry)
        except ValidationError as exc:
            errors.append(f"Pack #{idx}: {exc}")
            continue
        if pack.pack_id in pack_ids:
            errors.append(f"Pack id '{pack.pack_id}' defined multiple times.")
        pack_ids.add(pack.pack_id)
        if set_ids and pack.set_id not in set_ids:
            errors.append(f"Pack '{pack.pack_id}' references unknown set '{pack.set_id}'.")

    return errors


def _validate_card(set_id: str, card: Any, seen: set[str]) -> list[str]:
    if not isinstance(card, dict):
        return [f"Set '{set_id}' contains a card that is not an object."]
    card_id = card.get("id")
    if not isinstance(card_id, str) or not card_id.strip():
        return [f"Set '{set_id}' contains a card without 'id'."]
    errors: list[str] = []
    if card_id in seen:
        errors.append(f"Card id '{card_id}' defined multiple times.")
    seen.add(card_id)
    if not isinstance(card.get("name"), str) or not card["name"].strip():
        errors.append(f"Card '{card_id}' must define non-empty 'name'.")
    kind = card.get("kind", CardKind.POKEMON.value)
    try:
        CardKind(kind)
    except ValueError:
        errors.append(f"Card '{card_id}' has invalid kind '{kind}'.")
    rarity = card.get("rarity")
    if rarity is not None:
        try:
            Rarity(rarity)
        except ValueError:
            errors.append(f"Card '{card_id}' has invalid rarity '{rarity}'.")
    elif kind != CardKind.ENERGY.value:
        errors.append(f"Card '{card_id}' must define 'rarity'.")
    return errors


def _format_errors(prefix: str, errors: Iterable[str]) -> str:
    formatted = "\n".join(f"- {err}" for err in errors)
    return f"{prefix}:\n{formatted}"
