# tests/conftest.py

"""Shared pytest fixtures for all basket_search tests."""

from collections.abc import Generator

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def clear_context_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Remove BASKET_* seed variables so a developer's .env can't leak in."""
    for var in Settings.CONTEXT_ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    yield
