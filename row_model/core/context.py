"""Execution context passed through to contextual table-name lookups.

The context is opaque to this package: it is stored on a Model and handed
to ``TableNameAbleWithContext.table_name_for`` unchanged. Honoring
deadlines is the job of the query-execution layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class Context:
    """Immutable bag of request-scoped values with an optional deadline."""

    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    deadline: float | None = None

    @classmethod
    def background(cls) -> Context:
        """Empty context used when the caller supplied none."""
        return _BACKGROUND

    def with_value(self, key: str, value: Any) -> Context:
        """Return a child context carrying *key*."""
        merged = dict(self.values)
        merged[key] = value
        return Context(values=MappingProxyType(merged), deadline=self.deadline)

    def value(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


_BACKGROUND = Context()
