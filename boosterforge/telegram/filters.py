"""Reusable aiogram filters for BoosterForge bots."""

from __future__ import annotations

from aiogram.filters import BaseFilter
from aiogram.types import Message

from ..config import BoosterForgeConfig
from ..domain.daily_limits import DailyLimitTracker


class AdminFilter(BaseFilter):
    def __init__(self, config: BoosterForgeConfig) -> None:
        self._admins = set(config.admin.admin_ids)

    async def __call__(self, message: Message) -> bool:
        user = message.from_user
        return bool(user and user.id in self._admins)


class DailyLimitFilter(BaseFilter):
    """Filter that provides the caller's daily limit status."""

    def __init__(self, limits: DailyLimitTracker) -> None:
        self._limits = limits

    async def __call__(self, message: Message) -> dict | bool:
        user = message.from_user
        if not user:
            return False
        return {"limit_status": self._limits.status(user.id)}
