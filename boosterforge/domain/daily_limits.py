"""Per-user, per-day pack opening counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DailyLimitRecord:
    user_id: int
    date: str
    packs_opened: int = 0


@dataclass(frozen=True, slots=True)
class DailyLimitStatus:
    user_id: int
    date: str
    packs_opened: int
    packs_remaining: int
    daily_limit: int
    can_open: bool


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DailyLimitTracker:
    """Count pack openings per user for the current calendar day.

    Records are keyed by ``(user_id, date)``. A record from an earlier day is
    never read again, so correctness does not depend on :meth:`sweep`; the
    sweep only bounds memory.
    """

    def __init__(self, daily_limit: int = 5, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self.daily_limit = daily_limit
        self._clock = clock
        self._records: dict[tuple[int, str], DailyLimitRecord] = {}

    def today(self) -> str:
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        return now.date().isoformat()

    def status(self, user_id: int) -> DailyLimitStatus:
        record = self._record_for_today(user_id)
        remaining = max(0, self.daily_limit - record.packs_opened)
        return DailyLimitStatus(
            user_id=user_id,
            date=record.date,
            packs_opened=record.packs_opened,
            packs_remaining=remaining,
            daily_limit=self.daily_limit,
            can_open=remaining > 0,
        )

    def record(self, user_id: int) -> DailyLimitStatus:
        record = self._record_for_today(user_id)
        record.packs_opened += 1
        return self.status(user_id)

    def try_acquire(self, user_id: int) -> bool:
        """Check and increment in one step; used for the hard cap."""
        record = self._record_for_today(user_id)
        if record.packs_opened >= self.daily_limit:
            return False
        record.packs_opened += 1
        return True

    def release(self, user_id: int) -> None:
        """Give back a slot taken by :meth:`try_acquire` for an open that failed."""
        record = self._record_for_today(user_id)
        record.packs_opened = max(0, record.packs_opened - 1)

    def sweep(self) -> int:
        today = self.today()
        stale = [key for key, record in self._records.items() if record.date != today]
        for key in stale:
            del self._records[key]
        if stale:
            logger.info("Swept %s stale daily limit record(s).", len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._records)

    def _record_for_today(self, user_id: int) -> DailyLimitRecord:
        today = self.today()
        key = (user_id, today)
        record = self._records.get(key)
        if record is None or record.date != today:
            record = DailyLimitRecord(user_id=user_id, date=today)
            self._records[key] = record
        return record
