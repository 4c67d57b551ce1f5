"""Top level application object for BoosterForge services."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from random import Random
from typing import Any, Callable, Sequence

from .config import BoosterForgeConfig
from .domain.boosters import BoosterService
from .domain.cards import CardCatalog
from .domain.collection import CollectionService
from .domain.daily_limits import DailyLimitTracker
from .domain.draw import PackDrawEngine
from .domain.economy import EconomyService
from .domain.events import EventBus
from .domain.packs import PackRegistry, default_packs
from .domain.wheel import DEFAULT_SEGMENTS, WheelPrizeResolver, WheelSegment, WheelService
from .storage.base import AuditStore, LedgerStore, PlayerStore
from .storage.memory import InMemoryAuditStore, InMemoryLedgerStore, InMemoryPlayerStore
from .storage.sqlalchemy import AsyncSQLAlchemyStorage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BoosterApp:
    """Central dependency container; one instance owns all reward-engine state."""

    def __init__(
        self,
        config: BoosterForgeConfig,
        *,
        player_store: PlayerStore | None = None,
        ledger_store: LedgerStore | None = None,
        audit_store: AuditStore | None = None,
        event_bus: EventBus | None = None,
        rng: Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
        wheel_segments: Sequence[WheelSegment] = DEFAULT_SEGMENTS,
    ) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.catalog = CardCatalog(default_energy_set=config.draw.default_energy_set)
        self.packs = PackRegistry(default_packs() if config.seed_default_packs else ())

        self._rng = rng or (Random(config.rng_seed) if config.rng_seed is not None else Random())

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        self._sweep_task: asyncio.Task[None] | None = None
        (
            self.player_store,
            self.ledger_store,
            self.audit_store,
        ) = self._wire_storage(player_store, ledger_store, audit_store)

        self.economy = EconomyService(self.player_store, self.ledger_store)
        self.collection = CollectionService(self.player_store)
        self.daily_limits = DailyLimitTracker(config.daily_limit.packs_per_day, clock=clock)
        self.draw_engine = PackDrawEngine(
            self.catalog, self.packs, config.draw, rng=self._rng, clock=clock
        )
        self.boosters = BoosterService(
            packs=self.packs,
            engine=self.draw_engine,
            limits=self.daily_limits,
            economy=self.economy,
            collection=self.collection,
            event_bus=self.event_bus,
            limit_config=config.daily_limit,
        )
        self.prize_resolver = WheelPrizeResolver(self.economy, self.collection, config.wheel)
        self.wheel = WheelService(
            self.economy,
            self.prize_resolver,
            config.wheel,
            self.event_bus,
            segments=wheel_segments,
            rng=self._rng,
        )

    def _wire_storage(
        self,
        player_store: PlayerStore | None,
        ledger_store: LedgerStore | None,
        audit_store: AuditStore | None,
    ) -> tuple[PlayerStore, LedgerStore, AuditStore]:
        if player_store and ledger_store and audit_store:
            return player_store, ledger_store, audit_store

        backend = self.config.storage.backend
        if backend == "memory":
            return (
                player_store or InMemoryPlayerStore(),
                ledger_store or InMemoryLedgerStore(),
                audit_store or InMemoryAuditStore(),
            )
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            return (
                player_store or storage.player_store(),
                ledger_store or storage.ledger_store(),
                audit_store or storage.audit_store(),
            )
        raise ValueError(f"Unsupported storage backend {backend}")

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "sets": self.catalog.set_ids(),
            "packs": [summary.pack_id for summary in self.packs.list()],
            "daily_limit": self.daily_limits.daily_limit,
            "wheel_segments": len(self.wheel.segments),
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    def start_background_tasks(self) -> None:
        """Start the periodic daily-limit sweep; call from a running event loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._sweep_daily_limits())

    async def _sweep_daily_limits(self) -> None:
        interval = self.config.daily_limit.sweep_interval
        while True:
            await asyncio.sleep(interval)
            self.daily_limits.sweep()

    async def close(self) -> None:
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
