"""Testing utilities for BoosterForge."""

from .factory import CatalogCardFactory
from .fixtures import app_fixture, memory_app
from .test_client import TestClient

__all__ = [
    "CatalogCardFactory",
    "app_fixture",
    "memory_app",
    "TestClient",
]
