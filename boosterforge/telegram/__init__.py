"""Telegram integration helpers."""

from .aiogram_router import build_router
from .filters import AdminFilter, DailyLimitFilter
from .keyboards import pack_opened_keyboard, welcome_keyboard, wheel_keyboard

__all__ = [
    "build_router",
    "AdminFilter",
    "DailyLimitFilter",
    "pack_opened_keyboard",
    "welcome_keyboard",
    "wheel_keyboard",
]
