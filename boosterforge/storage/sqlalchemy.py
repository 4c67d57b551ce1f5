"""SQLAlchemy storage backend for BoosterForge."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Sequence

from sqlalchemy import DateTime, Integer, JSON, String, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .base import AuditStore, LedgerEntry, LedgerStore, PlayerRecord, PlayerStore, UserLocks

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class PlayerTable(Base):
    __tablename__ = "boosterforge_players"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    wallet: Mapped[dict] = mapped_column(JSON, default=dict)
    cards: Mapped[dict] = mapped_column(JSON, default=dict)
    cosmetics: Mapped[dict] = mapped_column(JSON, default=dict)


class LedgerTable(Base):
    __tablename__ = "boosterforge_ledger"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    currency: Mapped[str] = mapped_column(String(32))
    amount: Mapped[int] = mapped_column(Integer)
    balance_after: Mapped[int] = mapped_column(Integer)
    reason: Mapped[str] = mapped_column(String(64))
    note: Mapped[str] = mapped_column(String(255), default="")
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class AuditTable(Base):
    __tablename__ = "boosterforge_audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    action: Mapped[str] = mapped_column(String(128))
    payload: Mapped[dict] = mapped_column(JSON)


class AsyncSQLAlchemyStorage:
    """Bundle of async stores backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)
        self._locks = UserLocks()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            yield session

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def player_store(self) -> "AsyncSQLAlchemyPlayerStore":
        return AsyncSQLAlchemyPlayerStore(self._session_factory, self._locks)

    def ledger_store(self) -> "AsyncSQLAlchemyLedgerStore":
        return AsyncSQLAlchemyLedgerStore(self._session_factory)

    def audit_store(self) -> "AsyncSQLAlchemyAuditStore":
        return AsyncSQLAlchemyAuditStore(self._session_factory)


class AsyncSQLAlchemyPlayerStore(PlayerStore):
    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], locks: UserLocks | None = None
    ) -> None:
        self._session_factory = session_factory
        self._locks = locks or UserLocks()

    def lock(self, user_id: int) -> asyncio.Lock:
        return self._locks.for_user(user_id)

    async def get_or_create(self, user_id: int, username: str | None = None) -> PlayerRecord:
        async with self._session_factory() as session:
            row = await session.get(PlayerTable, user_id)
            if not row:
                session.add(
                    PlayerTable(user_id=user_id, username=username, wallet={}, cards={}, cosmetics={})
                )
                try:
                    await session.commit()
                except IntegrityError:
                    # Another request inserted the same player first.
                    await session.rollback()
                    logger.debug("Player %s was created concurrently; re-reading.", user_id)
                row = await session.get(PlayerTable, user_id)
            if username and row.username != username:
                row.username = username
                await session.commit()
            return PlayerRecord(
                user_id=row.user_id,
                username=row.username,
                wallet=dict(row.wallet or {}),
                cards=dict(row.cards or {}),
                cosmetics={kind: list(items) for kind, items in (row.cosmetics or {}).items()},
            )

    async def save(self, record: PlayerRecord) -> None:
        values = dict(
            username=record.username,
            wallet=dict(record.wallet),
            cards=dict(record.cards),
            cosmetics={kind: list(items) for kind, items in record.cosmetics.items()},
        )
        async with self._session_factory() as session:
            stmt = update(PlayerTable).where(PlayerTable.user_id == record.user_id).values(**values)
            result = await session.execute(stmt)
            if result.rowcount == 0:
                session.add(PlayerTable(user_id=record.user_id, **values))
            await session.commit()


class AsyncSQLAlchemyLedgerStore(LedgerStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_entry(self, entry: LedgerEntry) -> None:
        async with self._session_factory() as session:
            session.add(
                LedgerTable(
                    user_id=entry.user_id,
                    currency=entry.currency,
                    amount=entry.amount,
                    balance_after=entry.balance_after,
                    reason=entry.reason,
                    note=entry.note,
                    timestamp=entry.timestamp,
                )
            )
            await session.commit()

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[LedgerEntry]:
        async with self._session_factory() as session:
            stmt = (
                select(LedgerTable)
                .where(LedgerTable.user_id == user_id)
                .order_by(LedgerTable.id.desc())
                .limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [
                LedgerEntry(
                    user_id=row.user_id,
                    currency=row.currency,
                    amount=row.amount,
                    balance_after=row.balance_after,
                    reason=row.reason,
                    note=row.note,
                    timestamp=row.timestamp,
                )
                for row in rows
            ]


class AsyncSQLAlchemyAuditStore(AuditStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_entry(self, action: str, payload: dict) -> None:
        async with self._session_factory() as session:
            session.add(
                AuditTable(
                    created_at=datetime.now(timezone.utc),
                    action=action,
                    payload=dict(payload),
                )
            )
            await session.commit()
