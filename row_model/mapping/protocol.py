"""Table-name capabilities.

A record type may name its own table by implementing one of these
protocols. Each capability declares whether its result may be cached per
type; a contextual name depends on the call's context and never is.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from row_model.core.context import Context
from row_model.core.exceptions import DeclarationError


@runtime_checkable
class TableNameAble(Protocol):
    """Record type with a fixed custom table name."""

    def table_name(self) -> str:
        """Return the table name for this record type."""
        ...


@runtime_checkable
class TableNameAbleWithContext(Protocol):
    """Record type whose table name depends on the execution context."""

    def table_name_for(self, ctx: Context) -> str:
        """Return the table name for this record type under *ctx*."""
        ...


@dataclass(frozen=True)
class TableNameCapability:
    """Declared properties of a table-name capability."""

    protocol: type
    method: str
    takes_context: bool
    cacheable: bool

    def bind(self, record_type: type, instance: Any = None) -> Callable[..., str] | None:
        """Return the capability's callable for *record_type*, or None.

        Class and static methods are called on the type; instance methods
        and properties on *instance*, or on a bare uninitialized instance
        when none is available (an empty collection).

        Raises:
            DeclarationError: If a contextual capability is a property.
        """
        static = inspect.getattr_static(record_type, self.method, None)
        if static is None:
            return None
        if isinstance(static, (classmethod, staticmethod)):
            return getattr(record_type, self.method)  # type: ignore[no-any-return]
        is_property = isinstance(static, (property, functools.cached_property))
        if is_property and self.takes_context:
            raise DeclarationError(
                f"{record_type.__name__}.{self.method} must be a method taking a context, "
                "not a property"
            )
        if not is_property and not callable(static):
            return None
        target = instance if instance is not None else record_type.__new__(record_type)
        if is_property:
            return lambda: getattr(target, self.method)
        return getattr(target, self.method)  # type: ignore[no-any-return]

    def call(self, method: Callable[..., str], ctx: Context) -> str:
        if self.takes_context:
            return method(ctx)
        return method()


# Checked in order; the first capability a type implements wins.
CAPABILITIES: tuple[TableNameCapability, ...] = (
    TableNameCapability(TableNameAble, "table_name", takes_context=False, cacheable=True),
    TableNameCapability(
        TableNameAbleWithContext, "table_name_for", takes_context=True, cacheable=False
    ),
)
