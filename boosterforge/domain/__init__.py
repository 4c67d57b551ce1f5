"""Domain models and services."""

from .boosters import BoosterService
from .cards import CardCatalog, CardKind, CatalogCard, Rarity
from .collection import CollectionService, CosmeticKind, PlayerProfile
from .daily_limits import DailyLimitRecord, DailyLimitStatus, DailyLimitTracker
from .draw import DrawnCard, PackDrawEngine, PackOpeningResult, SkippedDraw, SlotType
from .economy import Currency, EconomyService, Wallet
from .events import EventBus
from .exceptions import (
    BoosterForgeError,
    Conflict,
    DailyLimitReached,
    InsufficientFunds,
    NotFound,
    Unavailable,
    ValidationError,
)
from .packs import PackDefinition, PackRegistry, PackSummary, SlotSpec, default_packs
from .prizes import PrizeKind, ResolvedPrize, parse_prize
from .wheel import ClaimReceipt, PrizeEffect, WheelPrizeResolver, WheelSegment, WheelService

__all__ = [
    "BoosterService",
    "CardCatalog",
    "CardKind",
    "CatalogCard",
    "Rarity",
    "CollectionService",
    "CosmeticKind",
    "PlayerProfile",
    "DailyLimitRecord",
    "DailyLimitStatus",
    "DailyLimitTracker",
    "DrawnCard",
    "PackDrawEngine",
    "PackOpeningResult",
    "SkippedDraw",
    "SlotType",
    "Currency",
    "EconomyService",
    "Wallet",
    "EventBus",
    "BoosterForgeError",
    "Conflict",
    "DailyLimitReached",
    "InsufficientFunds",
    "NotFound",
    "Unavailable",
    "ValidationError",
    "PackDefinition",
    "PackRegistry",
    "PackSummary",
    "SlotSpec",
    "default_packs",
    "PrizeKind",
    "ResolvedPrize",
    "parse_prize",
    "ClaimReceipt",
    "PrizeEffect",
    "WheelPrizeResolver",
    "WheelSegment",
    "WheelService",
]
