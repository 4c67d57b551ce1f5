"""In-memory storage backend for BoosterForge."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import replace
from datetime import datetime, timezone
from typing import Deque, Sequence

from .base import AuditStore, LedgerEntry, LedgerStore, PlayerRecord, PlayerStore, UserLocks


class InMemoryPlayerStore(PlayerStore):
    def __init__(self) -> None:
        self._records: dict[int, PlayerRecord] = {}
        self._locks = UserLocks()

    def lock(self, user_id: int) -> asyncio.Lock:
        return self._locks.for_user(user_id)

    async def get_or_create(self, user_id: int, username: str | None = None) -> PlayerRecord:
        if user_id not in self._records:
            self._records[user_id] = PlayerRecord(user_id=user_id, username=username)
        record = self._records[user_id]
        if username and record.username != username:
            record.username = username
        # Callers mutate the copy and persist it through save().
        return replace(
            record,
            wallet=dict(record.wallet),
            cards=dict(record.cards),
            cosmetics={kind: list(items) for kind, items in record.cosmetics.items()},
        )

    async def save(self, record: PlayerRecord) -> None:
        self._records[record.user_id] = record


class InMemoryLedgerStore(LedgerStore):
    def __init__(self, *, maxlen: int = 5000) -> None:
        self._entries: Deque[LedgerEntry] = deque(maxlen=maxlen)

    async def add_entry(self, entry: LedgerEntry) -> None:
        self._entries.append(entry)

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[LedgerEntry]:
        filtered = [entry for entry in reversed(self._entries) if entry.user_id == user_id]
        return filtered[:limit]


class InMemoryAuditStore(AuditStore):
    def __init__(self, *, maxlen: int = 1000) -> None:
        self._entries: Deque[tuple[datetime, str, dict]] = deque(maxlen=maxlen)

    async def add_entry(self, action: str, payload: dict) -> None:
        self._entries.append((datetime.now(timezone.utc), action, payload))

    def dump(self) -> list[tuple[datetime, str, dict]]:
        return list(self._entries)
