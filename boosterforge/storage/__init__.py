"""Storage backends for BoosterForge."""

from .base import AuditStore, LedgerEntry, LedgerStore, PlayerRecord, PlayerStore
from .memory import InMemoryAuditStore, InMemoryLedgerStore, InMemoryPlayerStore
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "AuditStore",
    "LedgerEntry",
    "LedgerStore",
    "PlayerRecord",
    "PlayerStore",
    "InMemoryAuditStore",
    "InMemoryLedgerStore",
    "InMemoryPlayerStore",
    "AsyncSQLAlchemyStorage",
]
