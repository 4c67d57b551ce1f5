"""Storage abstractions used by the BoosterForge services."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, Sequence
from weakref import WeakValueDictionary


@dataclass(slots=True)
class PlayerRecord:
    user_id: int
    username: str | None = None
    wallet: dict[str, int] = field(default_factory=dict)
    cards: dict[str, int] = field(default_factory=dict)
    cosmetics: dict[str, list[str]] = field(default_factory=dict)


@dataclass(slots=True)
class LedgerEntry:
    user_id: int
    currency: str
    amount: int
    balance_after: int
    reason: str
    note: str
    timestamp: datetime


class UserLocks:
    """One asyncio lock per user, dropped once no coroutine holds or awaits it.

    Locks only serialize writers inside one process; run a single bot
    process per database.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[int, asyncio.Lock] = WeakValueDictionary()

    def for_user(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)


class PlayerStore(Protocol):
    def lock(self, user_id: int) -> asyncio.Lock:
        """Lock that every read-modify-write of the user's record must hold."""
        ...

    async def get_or_create(self, user_id: int, username: str | None = None) -> PlayerRecord:
        ...

    async def save(self, record: PlayerRecord) -> None:
        ...


class LedgerStore(Protocol):
    async def add_entry(self, entry: LedgerEntry) -> None:
        ...

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[LedgerEntry]:
        ...


class AuditStore(Protocol):
    async def add_entry(self, action: str, payload: dict) -> None:
        ...
