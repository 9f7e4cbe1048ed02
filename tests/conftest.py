# tests/conftest.py

"""Shared pytest fixtures for all tests."""

from collections.abc import Generator

import pytest

from src.config.catalog import load_catalog_config


@pytest.fixture(autouse=True)
def fresh_catalog_config() -> Generator[None, None, None]:
    """Reload the process-wide catalogue config around every test."""
    load_catalog_config.cache_clear()
    yield
    load_catalog_config.cache_clear()
