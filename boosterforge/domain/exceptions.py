"""Exceptions raised by BoosterForge domain services."""

from __future__ import annotations


class BoosterForgeError(RuntimeError):
    """Base class for domain exceptions."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def to_payload(self) -> dict:
        return {"error": {"message": str(self), "code": self.code}}


class NotFound(BoosterForgeError):
    """Raised when a pack, set or card id is unknown."""

    status_code = 404
    code = "NOT_FOUND"


class Conflict(BoosterForgeError):
    """Raised when creating an entity whose id is already taken."""

    status_code = 409
    code = "CONFLICT"


class Unavailable(BoosterForgeError):
    """Raised when opening a pack that has been disabled."""

    status_code = 400
    code = "UNAVAILABLE"


class ValidationError(BoosterForgeError):
    """Raised for malformed admin payloads and strict prize parsing."""

    status_code = 422
    code = "VALIDATION_ERROR"


class InsufficientFunds(BoosterForgeError):
    """Raised when a wallet cannot satisfy a spend operation."""

    status_code = 400
    code = "INSUFFICIENT_FUNDS"

    def __init__(self, currency: str, balance: int, required: int) -> None:
        super().__init__(f"Insufficient {currency}: have {balance}, need {required}")
        self.currency = currency
        self.balance = balance
        self.required = required


class DailyLimitReached(BoosterForgeError):
    """Raised when a player has used up today's pack openings."""

    status_code = 429
    code = "DAILY_LIMIT_REACHED"

    def __init__(self, user_id: int, daily_limit: int) -> None:
        super().__init__("Daily pack limit reached. Come back tomorrow!")
        self.user_id = user_id
        self.daily_limit = daily_limit
