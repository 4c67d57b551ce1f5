"""BoosterForge reward engine public API."""

from .app import BoosterApp
from .config import BoosterForgeConfig

__all__ = [
    "BoosterApp",
    "BoosterForgeConfig",
]
