"""Example BoosterForge bot: Base Set and Jungle boosters plus the prize wheel."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from boosterforge import BoosterApp, BoosterForgeConfig
from boosterforge.diagnostics.economy_simulator import EconomySimulator
from boosterforge.loaders import load_catalog_from_json

STARTING_COINS = 1000


def register(app: BoosterApp) -> None:
    """Register card sets; the three default packs are seeded by the app."""
    catalog_path = Path(__file__).with_name("catalog") / "catalog.json"
    load_catalog_from_json(app, catalog_path)

    # Example of renaming an admin command.
    app.config.admin.commands.grant_coins = "gift"

    async def log_opening(payload) -> None:
        logging.getLogger(__name__).info("Pack opened: %s", payload["pack_id"])

    app.event_bus.subscribe("pack.opened", log_opening)


def simulate() -> None:
    app = BoosterApp(BoosterForgeConfig.from_env())
    register(app)
    result = EconomySimulator(app).simulate("base-set-booster", opens=100)
    print(f"Average cards: {result.average_cards:.2f}, holo rate: {result.holo_rate:.0%}")


async def run_bot() -> None:
    from aiogram import Bot, Dispatcher
    from aiogram.filters import Command
    from aiogram.types import Message

    from boosterforge.admin import build_admin_router
    from boosterforge.telegram import build_router

    logging.basicConfig(level=logging.INFO)
    app = BoosterApp(BoosterForgeConfig.from_env())
    await app.init_backend()
    register(app)

    bot = Bot(app.config.bot_token)
    dp = Dispatcher()

    @dp.message(Command("bonus"))
    async def handle_bonus(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        balance = await app.economy.add_coins(user.id, STARTING_COINS, "starter_bonus")
        await message.answer(f"Here are {STARTING_COINS} coins to get started. Balance: {balance}")

    dp.include_router(build_admin_router(app))
    dp.include_router(build_router(app, default_pack="base-set-booster"))
    app.start_background_tasks()
    try:
        await dp.start_polling(bot)
    finally:
        await app.close()


if __name__ == "__main__":
    asyncio.run(run_bot())
