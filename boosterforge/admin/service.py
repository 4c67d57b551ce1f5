"""Administrative operations for BoosterForge bots."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from ..config import AdminConfig
from ..domain.economy import EconomyService
from ..domain.events import EventBus
from ..domain.exceptions import NotFound
from ..domain.packs import PackDefinition, PackRegistry
from ..loaders.json_loader import pack_to_dict, parse_pack_patch, parse_pack_payload
from ..storage.base import AuditStore

logger = logging.getLogger(__name__)

ADMIN_GRANT_REASON = "admin_grant"


class AdminService:
    """Pack administration and manual coin grants.

    Payload methods accept the camelCase JSON shape used by the catalog
    files, so an HTTP or bot front-end can pass request bodies through.
    """

    def __init__(
        self,
        packs: PackRegistry,
        economy: EconomyService,
        audit_store: AuditStore,
        event_bus: EventBus,
        admin_config: AdminConfig,
    ) -> None:
        self._packs = packs
        self._economy = economy
        self._audit_store = audit_store
        self._events = event_bus
        self._config = admin_config

    async def create_pack(self, payload: Mapping[str, Any], *, actor: int | None = None) -> PackDefinition:
        pack = self._packs.create(parse_pack_payload(payload))
        await self._audit("create_pack", {"actor": actor, "pack_id": pack.pack_id})
        await self._events.publish("admin.pack.created", pack_to_dict(pack))
        return pack

    async def update_pack(
        self, pack_id: str, payload: Mapping[str, Any], *, actor: int | None = None
    ) -> PackDefinition:
        changes = parse_pack_patch(payload)
        pack = self._packs.update(pack_id, changes)
        await self._audit("update_pack", {"actor": actor, "pack_id": pack_id, "fields": sorted(changes)})
        await self._events.publish("admin.pack.updated", pack_to_dict(pack))
        return pack

    async def delete_pack(self, pack_id: str, *, actor: int | None = None) -> None:
        if not self._packs.delete(pack_id):
            raise NotFound(f"Pack '{pack_id}' not found")
        await self._audit("delete_pack", {"actor": actor, "pack_id": pack_id})
        await self._events.publish("admin.pack.deleted", {"pack_id": pack_id})

    async def set_pack_availability(
        self, pack_id: str, available: bool, *, actor: int | None = None
    ) -> PackDefinition:
        return await self.update_pack(pack_id, {"available": available}, actor=actor)

    async def grant_coins(self, user_id: int, amount: int, *, actor: int | None = None) -> int:
        if amount <= 0:
            raise ValueError("Amount must be positive")
        balance = await self._economy.add_coins(
            user_id, amount, ADMIN_GRANT_REASON, f"Granted by {actor}" if actor else ""
        )
        await self._audit("grant_coins", {"actor": actor, "user_id": user_id, "amount": amount})
        await self._events.publish(
            "admin.currency.granted",
            {"user_id": user_id, "currency": "coins", "amount": amount},
        )
        return balance

    async def _audit(self, action: str, payload: dict) -> None:
        logger.info("Admin action %s: %s", action, payload)
        if not self._config.enable_audit_logs:
            return
        await self._audit_store.add_entry(
            action,
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                **payload,
            },
        )
