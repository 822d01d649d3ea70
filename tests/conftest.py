"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

import pytest

from row_model.core.clock import reset_now_func, set_now_func
from row_model.core.settings import reset_settings
from row_model.mapping.registry import default_registry


@pytest.fixture(autouse=True)
def _isolate_metadata() -> Iterator[None]:
    """Every test starts with empty caches, default settings and the wall clock."""
    default_registry.clear()
    reset_settings()
    yield
    default_registry.clear()
    reset_settings()
    reset_now_func()


@pytest.fixture
def frozen_now() -> datetime:
    """A fixed instant installed as the process-wide clock."""
    instant = datetime(2024, 5, 17, 9, 30, 0)
    set_now_func(lambda: instant)
    return instant
