"""Validation utilities for BoosterForge applications."""

from __future__ import annotations

from .app import BoosterApp


def validate_app(app: BoosterApp) -> list[str]:
    """Return list of validation errors discovered in configured app."""
    errors: list[str] = []

    set_ids = set(app.catalog.set_ids())
    if not set_ids:
        errors.append("No card sets registered in application.")

    for pack in app.packs.iter_packs():
        if set_ids and pack.set_id not in set_ids:
            errors.append(f"Pack '{pack.pack_id}' references unknown set '{pack.set_id}'.")
        if not pack.slots:
            errors.append(f"Pack '{pack.pack_id}' does not define any slots.")
        if pack.price is not None and pack.price < 0:
            errors.append(f"Pack '{pack.pack_id}' has negative price '{pack.price}'.")
        for idx, slot in enumerate(pack.slots, start=1):
            if slot.count <= 0:
                errors.append(f"Pack '{pack.pack_id}' slot #{idx} has non-positive count '{slot.count}'.")
            for label, chance in (("holoChance", slot.holo_chance), ("upgradeChance", slot.upgrade_chance)):
                if chance is not None and not 0.0 <= chance <= 1.0:
                    errors.append(
                        f"Pack '{pack.pack_id}' slot #{idx} {label} '{chance}' must be between 0 and 1."
                    )

    for pack_id in app.config.draw.standard_booster_ids:
        if pack_id not in app.packs:
            errors.append(f"Standard booster '{pack_id}' is not a registered pack.")

    if app.config.daily_limit.packs_per_day <= 0:
        errors.append("Daily limit 'packs_per_day' must be positive.")
    if app.config.draw.energy_per_booster < 0:
        errors.append("Draw configuration 'energy_per_booster' cannot be negative.")

    wheel = app.config.wheel
    if wheel.spin_cost < 0:
        errors.append("Wheel configuration 'spin_cost' cannot be negative.")
    if wheel.max_jackpot_depth <= 0:
        errors.append("Wheel configuration 'max_jackpot_depth' must be positive.")

    return errors


__all__ = ["validate_app"]
