"""Virtual currency wallet and the ledger-backed economy service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict

from .exceptions import InsufficientFunds
from ..storage.base import LedgerEntry, LedgerStore, PlayerStore

logger = logging.getLogger(__name__)


class Currency(str, Enum):
    COINS = "coins"
    COUPONS = "coupons"
    RARE_CANDY = "rare_candy"


@dataclass(slots=True)
class Wallet:
    """Mutable wallet representation used by services."""

    balances: Dict[str, int] = field(default_factory=dict)

    def balance(self, currency: Currency) -> int:
        return self.balances.get(currency.value, 0)

    def credit(self, currency: Currency, amount: int) -> int:
        if amount < 0:
            raise ValueError("Cannot credit negative amount")
        self.balances[currency.value] = self.balance(currency) + amount
        return self.balances[currency.value]

    def debit(self, currency: Currency, amount: int) -> int:
        if amount < 0:
            raise ValueError("Cannot debit negative amount")
        current = self.balance(currency)
        if current < amount:
            raise InsufficientFunds(currency.value, current, amount)
        self.balances[currency.value] = current - amount
        return self.balances[currency.value]


class EconomyService:
    """Credit and debit player balances, logging each change to the ledger."""

    def __init__(self, player_store: PlayerStore, ledger: LedgerStore) -> None:
        self._players = player_store
        self._ledger = ledger

    async def balance(self, user_id: int, currency: Currency = Currency.COINS) -> int:
        record = await self._players.get_or_create(user_id)
        return Wallet(balances=record.wallet).balance(currency)

    async def spend_coins(self, user_id: int, amount: int, reason: str, note: str = "") -> int:
        return await self._apply(user_id, Currency.COINS, -amount, reason, note)

    async def add_coins(self, user_id: int, amount: int, reason: str, note: str = "") -> int:
        return await self._apply(user_id, Currency.COINS, amount, reason, note)

    async def add_coupons(self, user_id: int, amount: int, reason: str, note: str = "") -> int:
        return await self._apply(user_id, Currency.COUPONS, amount, reason, note)

    async def add_rare_candy(self, user_id: int, amount: int, reason: str, note: str = "") -> int:
        return await self._apply(user_id, Currency.RARE_CANDY, amount, reason, note)

    async def _apply(
        self, user_id: int, currency: Currency, delta: int, reason: str, note: str
    ) -> int:
        async with self._players.lock(user_id):
            record = await self._players.get_or_create(user_id)
            wallet = Wallet(balances=dict(record.wallet))
            if delta < 0:
                balance = wallet.debit(currency, -delta)
            else:
                balance = wallet.credit(currency, delta)
            record.wallet = dict(wallet.balances)
            await self._players.save(record)
        await self._ledger.add_entry(
            LedgerEntry(
                user_id=user_id,
                currency=currency.value,
                amount=delta,
                balance_after=balance,
                reason=reason,
                note=note,
                timestamp=datetime.now(timezone.utc),
            )
        )
        logger.debug("User %s %s %+d (%s) -> %s", user_id, currency.value, delta, reason, balance)
        return balance
