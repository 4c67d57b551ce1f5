"""Pytest fixtures for BoosterForge."""

from __future__ import annotations

import pytest

from ..app import BoosterApp
from ..config import BoosterForgeConfig


@pytest.fixture()
def memory_app() -> BoosterApp:
    config = BoosterForgeConfig(bot_token="test", storage=BoosterForgeConfig().storage)
    return BoosterApp(config)


def app_fixture(bot_token: str = "test", **kwargs) -> BoosterApp:
    """Helper for ad-hoc tests where pytest is not available."""
    config = BoosterForgeConfig(bot_token=bot_token, **kwargs)
    return BoosterApp(config)
