"""Process-wide time source used for created_at/updated_at stamping.

Tests replace it with :func:`set_now_func` before spawning any workers;
readers never lock.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime

NowFunc = Callable[[], datetime]

_lock = threading.Lock()
_now_func: NowFunc = datetime.now


def set_now_func(func: NowFunc) -> None:
    """Override the clock used for CreatedAt/UpdatedAt stamping."""
    global _now_func
    with _lock:
        _now_func = func


def reset_now_func() -> None:
    """Restore the wall clock."""
    set_now_func(datetime.now)


def get_now_func() -> NowFunc:
    return _now_func


def now() -> datetime:
    """Current time according to the active clock."""
    return _now_func()
