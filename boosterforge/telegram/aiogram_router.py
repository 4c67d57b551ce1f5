"""Factory helpers to wire BoosterForge services into aiogram."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from ..app import BoosterApp
from ..domain.cards import CardCatalog
from ..domain.daily_limits import DailyLimitStatus
from ..domain.draw import PackOpeningResult
from ..domain.exceptions import (
    BoosterForgeError,
    DailyLimitReached,
    InsufficientFunds,
    NotFound,
    Unavailable,
)
from ..domain.packs import PackSummary
from ..domain.wheel import ClaimReceipt
from .filters import DailyLimitFilter
from .keyboards import pack_opened_keyboard, welcome_keyboard, wheel_keyboard

logger = logging.getLogger(__name__)


def build_router(app: BoosterApp, *, default_pack: str | None = None) -> Router:
    resolved_pack = ensure_catalog_ready(app, default_pack)

    router = Router()
    boosters = app.boosters

    @router.message(Command("start"))
    async def handle_start(message: Message) -> None:
        user = message.from_user
        if user:
            await app.collection.fetch(user.id, user.username)
        await message.answer(
            render_help_message(resolved_pack),
            reply_markup=welcome_keyboard(resolved_pack),
        )

    @router.message(Command("help"))
    async def handle_help(message: Message) -> None:
        await message.answer(
            render_help_message(resolved_pack),
            reply_markup=welcome_keyboard(resolved_pack),
        )

    @router.message(Command("packs"))
    async def handle_packs(message: Message) -> None:
        await message.answer(format_pack_list(app.packs.list()))

    @router.message(Command("open"))
    async def handle_open(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        pack_id = extract_pack_id(message.text, resolved_pack)
        try:
            result = await boosters.open_pack(user.id, pack_id)
        except BoosterForgeError as exc:
            await message.answer(describe_error(exc))
            return
        await message.answer(
            format_opening_message(result, boosters.status(user.id)),
            reply_markup=pack_opened_keyboard(pack_id),
        )

    @router.callback_query(lambda c: c.data and c.data.startswith("boosterforge:open:"))
    async def handle_open_again(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user or not callback.data:
            return
        pack_id = callback.data.split(":", 2)[-1]
        try:
            result = await boosters.open_pack(user.id, pack_id)
        except BoosterForgeError as exc:
            await callback.answer(describe_error(exc), show_alert=True)
            return
        await callback.message.edit_text(
            format_opening_message(result, boosters.status(user.id)),
            reply_markup=pack_opened_keyboard(pack_id),
        )
        await callback.answer()

    @router.message(Command("limit"), DailyLimitFilter(app.daily_limits))
    async def handle_limit(message: Message, limit_status: DailyLimitStatus) -> None:
        await message.answer(format_limit_message(limit_status))

    @router.message(Command("collection"))
    async def handle_collection(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        profile = await app.collection.fetch(user.id)
        await message.answer(format_collection_message(profile.cards, app.catalog, profile.wallet))

    @router.callback_query(lambda c: c.data == "boosterforge:collection")
    async def handle_collection_callback(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user:
            return
        profile = await app.collection.fetch(user.id)
        await callback.answer()
        await callback.message.answer(
            format_collection_message(profile.cards, app.catalog, profile.wallet)
        )

    @router.message(Command("spin"))
    async def handle_spin(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        try:
            receipt, bonus = await app.wheel.spin_and_claim(user.id)
        except BoosterForgeError as exc:
            await message.answer(describe_error(exc))
            return
        await message.answer(format_claim_message(receipt, bonus), reply_markup=wheel_keyboard())

    @router.callback_query(lambda c: c.data == "boosterforge:spin")
    async def handle_spin_callback(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user:
            return
        try:
            receipt, bonus = await app.wheel.spin_and_claim(user.id)
        except BoosterForgeError as exc:
            await callback.answer(describe_error(exc), show_alert=True)
            return
        await callback.answer()
        await callback.message.answer(
            format_claim_message(receipt, bonus), reply_markup=wheel_keyboard()
        )

    @router.callback_query(lambda c: c.data == "boosterforge:help")
    async def handle_help_callback(callback: CallbackQuery) -> None:
        await callback.answer()
        await callback.message.answer(
            render_help_message(resolved_pack),
            reply_markup=welcome_keyboard(resolved_pack),
        )

    return router


def ensure_catalog_ready(app: BoosterApp, default_pack: str | None) -> str:
    packs = list(app.packs.iter_packs())
    if not packs:
        raise RuntimeError(
            "No packs registered. Seed the default packs or use load_catalog_from_json."
        )
    pack_ids = {pack.pack_id for pack in packs}
    if default_pack and default_pack not in pack_ids:
        raise RuntimeError(
            f"Pack '{default_pack}' not found. Available packs: {', '.join(sorted(pack_ids))}."
        )
    for pack in packs:
        if not app.catalog.has_set(pack.set_id):
            logger.warning("Pack '%s' uses unregistered set '%s'.", pack.pack_id, pack.set_id)
    return default_pack or packs[0].pack_id


def render_help_message(default_pack: str | None) -> str:
    lines = [
        "Hi! Open booster packs, collect cards and spin the prize wheel.",
        "",
        "Commands:",
        "• /packs - list available packs",
        "• /open <pack> - open a pack",
        "• /limit - packs left today",
        "• /collection - your cards and balances",
        "• /spin - spin the prize wheel",
        "• /help - show this message",
    ]
    if default_pack:
        lines.append(f"• /open {default_pack} - open the default pack")
    return "\n".join(lines)


def extract_pack_id(text: str | None, default_pack: str) -> str:
    if text and len(parts := text.strip().split()) > 1:
        return parts[1]
    return default_pack


def describe_error(exc: BoosterForgeError) -> str:
    if isinstance(exc, DailyLimitReached):
        return f"Daily pack limit reached ({exc.daily_limit}). Come back tomorrow!"
    if isinstance(exc, InsufficientFunds):
        return f"Not enough {exc.currency}: you have {exc.balance}, need {exc.required}."
    if isinstance(exc, NotFound):
        return "Pack not found. Use /packs to see what is available."
    if isinstance(exc, Unavailable):
        return "This pack is not available right now."
    return str(exc)


def format_pack_list(packs: Iterable[PackSummary]) -> str:
    lines = [
        f"• {pack.pack_id}: {pack.name} ({pack.card_count} cards, {pack.price} coins)"
        for pack in packs
        if pack.available
    ]
    return "\n".join(lines) or "No packs available yet."


def format_opening_message(result: PackOpeningResult, status: DailyLimitStatus | None = None) -> str:
    lines = [f"🎴 {result.pack_name}:"]
    for drawn in result.cards:
        marker = " ✨" if drawn.is_holo else ""
        lines.append(f"• {drawn.card.name} [{drawn.slot_type.value}]{marker}")
    if not result.cards:
        lines.append("• (no cards)")
    if result.skipped:
        lines.append("")
        lines.append(f"⚠️ {len(result.skipped)} slot(s) had no cards to draw.")
    if status is not None:
        lines.append("")
        lines.append(f"Packs left today: {status.packs_remaining}/{status.daily_limit}")
    return "\n".join(lines)


def format_limit_message(status: DailyLimitStatus) -> str:
    if status.can_open:
        return (
            f"Opened {status.packs_opened}/{status.daily_limit} packs today. "
            f"{status.packs_remaining} left."
        )
    return f"Daily limit of {status.daily_limit} packs reached. Come back tomorrow!"


def format_collection_message(
    cards: Mapping[str, int],
    catalog: CardCatalog,
    wallet: Mapping[str, int] | None = None,
) -> str:
    lines: list[str] = []
    if wallet:
        lines.append("💰 " + ", ".join(f"{code}: {amount}" for code, amount in sorted(wallet.items())))
        lines.append("")
    if not cards:
        lines.append("Your collection is empty. Open a pack with /open.")
        return "\n".join(lines)

    lines.append("📚 Collection:")
    for card_id, amount in sorted(cards.items()):
        try:
            card = catalog.get_card(card_id)
        except NotFound:
            lines.append(f"• {card_id}: x{amount}")
            continue
        rarity = f" [{card.rarity.value}]" if card.rarity else ""
        lines.append(f"• {card.name}{rarity}: x{amount}")
    return "\n".join(lines)


def format_claim_message(receipt: ClaimReceipt, bonus_coins: int = 0) -> str:
    lines = [f"🎡 You won: {receipt.prize.kind.value.replace('_', ' ')}"]
    for effect in receipt.effects:
        if effect.effect == "currency":
            lines.append(f"• +{effect.amount} {effect.target}")
        elif effect.effect == "card":
            lines.append(f"• card {effect.target}")
        else:
            suffix = "" if effect.new else " (already owned)"
            lines.append(f"• {effect.target}{suffix}")
    if bonus_coins:
        lines.append(f"• +{bonus_coins} coins bonus")
    if not receipt.effects and not bonus_coins:
        lines.append("Better luck next time!")
    return "\n".join(lines)
