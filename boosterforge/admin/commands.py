"""Admin command wiring for aiogram."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from ..app import BoosterApp
from ..domain.exceptions import BoosterForgeError
from ..telegram.filters import AdminFilter
from .service import AdminService


def build_admin_router(app: BoosterApp) -> Router:
    router = Router()
    router.message.filter(AdminFilter(app.config))
    service = app_admin_service(app)
    commands = app.config.admin.commands

    async def _toggle(message: Message, command: str, available: bool) -> None:
        parts = (message.text or "").split()
        if len(parts) < 2:
            await message.answer(f"Usage: /{command} <pack_id>")
            return
        try:
            pack = await service.set_pack_availability(
                parts[1], available, actor=message.from_user.id
            )
        except BoosterForgeError as exc:
            await message.answer(str(exc))
            return
        state = "enabled" if pack.available else "disabled"
        await message.answer(f"Pack {pack.pack_id} {state}.")

    @router.message(Command(commands.enable_pack))
    async def handle_enable(message: Message) -> None:
        await _toggle(message, commands.enable_pack, True)

    @router.message(Command(commands.disable_pack))
    async def handle_disable(message: Message) -> None:
        await _toggle(message, commands.disable_pack, False)

    @router.message(Command(commands.delete_pack))
    async def handle_delete(message: Message) -> None:
        parts = (message.text or "").split()
        if len(parts) < 2:
            await message.answer(f"Usage: /{commands.delete_pack} <pack_id>")
            return
        try:
            await service.delete_pack(parts[1], actor=message.from_user.id)
        except BoosterForgeError as exc:
            await message.answer(str(exc))
            return
        await message.answer(f"Pack {parts[1]} deleted.")

    @router.message(Command(commands.grant_coins))
    async def handle_grant_coins(message: Message) -> None:
        parts = (message.text or "").split()
        if len(parts) < 3 or not parts[1].isdigit() or not parts[2].isdigit():
            await message.answer(f"Usage: /{commands.grant_coins} <user_id> <amount>")
            return
        target = int(parts[1])
        amount = int(parts[2])
        if amount <= 0:
            await message.answer("Amount must be positive.")
            return
        balance = await service.grant_coins(target, amount, actor=message.from_user.id)
        await message.answer(f"Granted {amount} coins to {target} (balance {balance}).")

    return router


def app_admin_service(app: BoosterApp) -> AdminService:
    return AdminService(
        packs=app.packs,
        economy=app.economy,
        audit_store=app.audit_store,
        event_bus=app.event_bus,
        admin_config=app.config.admin,
    )
