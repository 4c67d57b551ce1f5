"""Keyboard helpers for BoosterForge bots."""

from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup


def pack_opened_keyboard(pack_id: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="🎴 Open another", callback_data=f"boosterforge:open:{pack_id}")],
            [InlineKeyboardButton(text="📚 Collection", callback_data="boosterforge:collection")],
            [InlineKeyboardButton(text="🎡 Spin the wheel", callback_data="boosterforge:spin")],
        ]
    )


def wheel_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="🎡 Spin again", callback_data="boosterforge:spin")],
            [InlineKeyboardButton(text="📚 Collection", callback_data="boosterforge:collection")],
        ]
    )


def welcome_keyboard(default_pack: str | None = None) -> InlineKeyboardMarkup:
    buttons = [
        [InlineKeyboardButton(text="📚 Collection", callback_data="boosterforge:collection")],
        [InlineKeyboardButton(text="🎡 Spin the wheel", callback_data="boosterforge:spin")],
        [InlineKeyboardButton(text="ℹ️ Help", callback_data="boosterforge:help")],
    ]
    if default_pack:
        buttons.insert(
            0,
            [
                InlineKeyboardButton(
                    text="🎴 Open a pack",
                    callback_data=f"boosterforge:open:{default_pack}",
                )
            ],
        )
    return InlineKeyboardMarkup(inline_keyboard=buttons)
