"""Record metadata plan data classes.

Frozen dataclasses describing how a record type maps onto a table. Built
once per type by :mod:`row_model.mapping.builder` and cached in the
:class:`~row_model.mapping.registry.RecordRegistry`.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any


class Tags:
    """Field tags carried in ``Annotated`` metadata.

        name: Annotated[str, Tags(db="full_name")]
    """

    __slots__ = ("values",)

    def __init__(self, **values: Any) -> None:
        self.values = MappingProxyType(values)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Tags) and dict(self.values) == dict(other.values)

    def __hash__(self) -> int:
        return hash(tuple(sorted((k, repr(v)) for k, v in self.values.items())))

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.values.items())
        return f"Tags({args})"


@dataclass(frozen=True)
class FieldPlan:
    """Mapping of one attribute (possibly promoted from an embedded record)."""

    attribute: str
    path: tuple[str, ...]  # attribute path from the record, e.g. ("audit", "created_at")
    column: str
    annotation: Any = None  # declared type with Optional/Annotated removed
    skip: bool = False
    rw: str = ""
    select: str | None = None
    no_auto_increment: str = ""
    association: str | None = None

    @property
    def persistable(self) -> bool:
        return not self.skip and self.association is None

    @property
    def column_spec(self) -> str:
        if self.rw:
            return f"{self.column},{self.rw}"
        return self.column


@dataclass(frozen=True)
class RecordPlan:
    """Compiled metadata for one record type."""

    record_type: type
    fields: tuple[FieldPlan, ...] = ()
    id_attribute: str = "id"

    def field(self, attribute: str) -> FieldPlan | None:
        """Find a field by attribute name; shallower fields shadow promoted ones."""
        matches = [f for f in self.fields if f.attribute == attribute]
        if not matches:
            return None
        return min(matches, key=lambda f: len(f.path))

    def column_fields(self) -> list[FieldPlan]:
        """Fields that become columns, in declaration order."""
        return [f for f in self.fields if f.persistable]
