"""Automated checks to highlight catalog and pack balancing issues."""

from __future__ import annotations

from dataclasses import dataclass

from ..app import BoosterApp
from ..domain.cards import Rarity
from ..domain.draw import RARITY_UPGRADES


@dataclass(slots=True)
class ChecklistIssue:
    severity: str
    message: str


def run_checklist(app: BoosterApp) -> list[ChecklistIssue]:
    issues: list[ChecklistIssue] = []
    if not app.catalog.set_ids():
        issues.append(ChecklistIssue("error", "No card sets registered."))

    packs = list(app.packs.iter_packs())
    if not packs:
        issues.append(ChecklistIssue("error", "No packs registered."))

    for pack in packs:
        if not app.catalog.has_set(pack.set_id):
            issues.append(
                ChecklistIssue("error", f"Pack {pack.pack_id} uses unknown set '{pack.set_id}'.")
            )
            continue
        if not pack.available:
            issues.append(ChecklistIssue("info", f"Pack {pack.pack_id} is disabled."))
        for idx, slot in enumerate(pack.slots, start=1):
            if slot.holo_chance and slot.rarity is not Rarity.RARE:
                issues.append(
                    ChecklistIssue(
                        "warning",
                        f"Pack {pack.pack_id} slot #{idx}: holoChance is ignored on "
                        f"'{slot.rarity.value}' slots.",
                    )
                )
            targets = {slot.rarity}
            if slot.rarity is Rarity.RARE and slot.holo_chance:
                targets.add(Rarity.RARE_HOLO)
            if slot.upgrade_chance and slot.rarity in RARITY_UPGRADES:
                targets.add(RARITY_UPGRADES[slot.rarity])
            for target in sorted(targets, key=lambda rarity: rarity.value):
                if app.catalog.cards_by_rarity(pack.set_id, target):
                    continue
                severity = "error" if target is slot.rarity else "warning"
                issues.append(
                    ChecklistIssue(
                        severity,
                        f"Pack {pack.pack_id} slot #{idx}: no '{target.value}' cards in set "
                        f"'{pack.set_id}'; those draws will be skipped.",
                    )
                )
        standard = pack.pack_id in app.config.draw.standard_booster_ids
        expected = pack.draw_count + (app.config.draw.energy_per_booster if standard else 0)
        if pack.card_count and pack.card_count != expected:
            issues.append(
                ChecklistIssue(
                    "warning",
                    f"Pack {pack.pack_id} advertises {pack.card_count} cards but draws {expected}.",
                )
            )
        if standard and not app.catalog.energy_cards(pack.set_id):
            issues.append(
                ChecklistIssue(
                    "warning", f"Pack {pack.pack_id} is a standard booster but no energy cards exist."
                )
            )

    return issues
