"""Configuration models for BoosterForge."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal, Sequence


StorageBackend = Literal["memory", "sqlalchemy"]

_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure how player state and the ledger are persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./boosterforge.db"
        return None


@dataclass(slots=True)
class AdminCommandConfig:
    """Allows renaming admin bot commands."""

    enable_pack: str = "packon"
    disable_pack: str = "packoff"
    delete_pack: str = "packdel"
    grant_coins: str = "grantcoins"


@dataclass(slots=True)
class AdminConfig:
    """Feature switches for admin tooling."""

    admin_ids: set[int] = field(default_factory=set)
    enable_audit_logs: bool = True
    commands: AdminCommandConfig = field(default_factory=AdminCommandConfig)


@dataclass(slots=True)
class DailyLimitConfig:
    """Per-user cap on pack openings per calendar day (UTC)."""

    packs_per_day: int = 5
    # Soft cap by default: concurrent opens may exceed the limit by one.
    strict: bool = False
    # Seconds between sweeps of stale per-day records.
    sweep_interval: float = 3600.0


@dataclass(slots=True)
class DrawConfig:
    """Rules for the pack draw engine."""

    standard_booster_ids: Sequence[str] = ("base-set-booster", "jungle-booster")
    energy_per_booster: int = 2
    default_energy_set: str = "base-set"


@dataclass(slots=True)
class WheelConfig:
    """Prize wheel costs and fixed jackpot payouts."""

    spin_cost: int = 100
    free_pack_coins: int = 200
    jackpot_rare_candy: int = 1
    jackpot_coupons: int = 100
    max_jackpot_depth: int = 8


@dataclass(slots=True)
class BoosterForgeConfig:
    """Top-level configuration container."""

    bot_token: str = ""
    storage: StorageConfig = field(default_factory=StorageConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    daily_limit: DailyLimitConfig = field(default_factory=DailyLimitConfig)
    draw: DrawConfig = field(default_factory=DrawConfig)
    wheel: WheelConfig = field(default_factory=WheelConfig)
    seed_default_packs: bool = True
    rng_seed: int | None = None

    @classmethod
    def from_env(cls) -> "BoosterForgeConfig":
        """Create config from environment variables prefixed with BOOSTERFORGE_."""
        prefix = "BOOSTERFORGE_"
        storage_backend = os.getenv(f"{prefix}STORAGE_BACKEND", "memory")
        dsn = os.getenv(f"{prefix}STORAGE_DSN")
        echo_sql = os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY

        admin_ids = {
            int(_id.strip())
            for _id in os.getenv(f"{prefix}ADMIN_IDS", "").split(",")
            if _id.strip()
        }
        admin_config = AdminConfig(
            admin_ids=admin_ids,
            enable_audit_logs=os.getenv(f"{prefix}ADMIN_ENABLE_AUDIT_LOGS", "true").lower()
            in _TRUTHY,
            commands=AdminCommandConfig(
                enable_pack=os.getenv(f"{prefix}ADMIN_CMD_ENABLE_PACK") or "packon",
                disable_pack=os.getenv(f"{prefix}ADMIN_CMD_DISABLE_PACK") or "packoff",
                delete_pack=os.getenv(f"{prefix}ADMIN_CMD_DELETE_PACK") or "packdel",
                grant_coins=os.getenv(f"{prefix}ADMIN_CMD_GRANT_COINS") or "grantcoins",
            ),
        )

        daily_limit = DailyLimitConfig(
            packs_per_day=int(os.getenv(f"{prefix}DAILY_PACK_LIMIT", "5")),
            strict=os.getenv(f"{prefix}DAILY_LIMIT_STRICT", "false").lower() in _TRUTHY,
            sweep_interval=float(os.getenv(f"{prefix}DAILY_LIMIT_SWEEP_SECONDS", "3600")),
        )

        booster_ids = tuple(
            pack_id.strip()
            for pack_id in os.getenv(
                f"{prefix}STANDARD_BOOSTERS", "base-set-booster,jungle-booster"
            ).split(",")
            if pack_id.strip()
        )
        draw = DrawConfig(
            standard_booster_ids=booster_ids,
            energy_per_booster=int(os.getenv(f"{prefix}ENERGY_PER_BOOSTER", "2")),
            default_energy_set=os.getenv(f"{prefix}DEFAULT_ENERGY_SET", "base-set"),
        )

        wheel = WheelConfig(
            spin_cost=int(os.getenv(f"{prefix}WHEEL_SPIN_COST", "100")),
            free_pack_coins=int(os.getenv(f"{prefix}WHEEL_FREE_PACK_COINS", "200")),
            max_jackpot_depth=int(os.getenv(f"{prefix}WHEEL_MAX_JACKPOT_DEPTH", "8")),
        )

        return cls(
            bot_token=os.getenv(f"{prefix}BOT_TOKEN", ""),
            storage=StorageConfig(backend=storage_backend, dsn=dsn, echo_sql=echo_sql),
            admin=admin_config,
            daily_limit=daily_limit,
            draw=draw,
            wheel=wheel,
            seed_default_packs=os.getenv(f"{prefix}SEED_DEFAULT_PACKS", "true").lower()
            in _TRUTHY,
            rng_seed=(
                int(os.getenv(f"{prefix}RNG_SEED")) if os.getenv(f"{prefix}RNG_SEED") else None
            ),
        )
