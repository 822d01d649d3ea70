"""Model wrapper.

Wraps the value handed to the persistence layer - a record, a list or
tuple of records, or a bare table name - and answers the metadata
questions query building needs: table name, columns, primary key. It
also performs the in-place ID and timestamp mutations around writes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from row_model.columns.column import Column
from row_model.columns.columns import Columns, IDField
from row_model.columns.for_type import for_type_with_alias
from row_model.core import clock as clock_hook
from row_model.core.clock import NowFunc
from row_model.core.context import Context
from row_model.core.enums import KeyKind
from row_model.core.exceptions import (
    MetadataError,
    MissingFieldError,
    NotARecordError,
    UnknownRecordTypeError,
)
from row_model.core.logging import get_logger
from row_model.core.naming import singularize, tableize
from row_model.core.settings import get_settings
from row_model.mapping.builder import is_record_type
from row_model.mapping.plan import FieldPlan, RecordPlan
from row_model.mapping.protocol import CAPABILITIES
from row_model.mapping.registry import RecordRegistry, default_registry

logger = get_logger(__name__)

ModelIterable = Callable[["Model"], Any]

_DEFAULT_ID_FIELD = "id"


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) == datetime.min
    if isinstance(value, (int, float, str)):
        return not value
    return False


class Model:
    """Metadata and mutation view over a caller-supplied value.

    Args:
        value: A record instance, a list/tuple of records, or a ``str``
            used verbatim as the table name.
        ctx: Execution context handed to contextual table-name lookups.
        as_name: Alias used when the table appears more than once in a query.
        record_type: Element type of a collection; required only when the
            collection may be empty.
        clock: Time source for :meth:`touch_created_at` /
            :meth:`touch_updated_at`; defaults to the process-wide clock.
        registry: Metadata cache; defaults to the process-wide registry.
    """

    def __init__(
        self,
        value: Any,
        ctx: Context | None = None,
        as_name: str = "",
        *,
        record_type: type | None = None,
        clock: NowFunc | None = None,
        registry: RecordRegistry | None = None,
    ) -> None:
        self.value = value
        self.ctx = ctx
        self.as_name = as_name
        self._record_type = record_type
        self._clock = clock
        self._registry = registry if registry is not None else default_registry

    def __repr__(self) -> str:
        return f"Model({self.value!r}, as_name={self.as_name!r})"

    # --- Shape ---

    def is_collection(self) -> bool:
        return isinstance(self.value, (list, tuple))

    def record_type(self) -> type:
        """Type of the wrapped record, or of a collection's elements."""
        if not self.is_collection():
            return type(self.value)
        if self._record_type is not None:
            return self._record_type
        if self.value:
            return type(self.value[0])
        raise UnknownRecordTypeError()

    def context(self) -> Context:
        return self.ctx if self.ctx is not None else Context.background()

    def _plan(self) -> RecordPlan:
        record_type = self.record_type()
        if not is_record_type(record_type):
            raise NotARecordError(record_type.__name__)
        return self._registry.plan_for(record_type)

    def _field(self, attribute: str) -> FieldPlan:
        """Type-level lookup of *attribute*; collections use their element type."""
        plan = self._plan()
        field_plan = plan.field(attribute)
        if field_plan is None:
            raise MissingFieldError(plan.record_type.__name__, attribute)
        return field_plan

    def _id_plan(self) -> FieldPlan:
        return self._field(self._plan().id_attribute)

    def _record(self) -> Any:
        if self.is_collection() or not is_record_type(type(self.value)):
            raise NotARecordError(type(self.value).__name__)
        return self.value

    def _get(self, field_plan: FieldPlan) -> Any:
        target = self._record()
        for attribute in field_plan.path:
            if target is None:
                raise MissingFieldError(type(self.value).__name__, field_plan.attribute)
            target = getattr(target, attribute)
        return target

    def _set(self, field_plan: FieldPlan, value: Any) -> None:
        target = self._record()
        for attribute in field_plan.path[:-1]:
            target = getattr(target, attribute)
            if target is None:
                return
        setattr(target, field_plan.path[-1], value)

    # --- Table name ---

    def table_name(self) -> str:
        """Name of the table backing the wrapped value.

        Precedence: a ``str`` value itself, then ``table_name()``, then
        ``table_name_for(ctx)``, then the tableized type name. Collections
        resolve through their element type.
        """
        if isinstance(self.value, str):
            return self.value

        record_type = self.record_type()
        if self.is_collection():
            instance = self.value[0] if self.value else None
        else:
            instance = self.value

        for capability in CAPABILITIES:
            method = capability.bind(record_type, instance)
            if method is None:
                continue
            if capability.cacheable:
                return self._registry.table_name(
                    record_type, lambda: capability.call(method, self.context())
                )
            name = capability.call(method, self.context())
            logger.debug(
                "table_name_resolved",
                record_type=record_type.__qualname__,
                table=name,
                cached=False,
            )
            return name

        return self._registry.table_name(record_type, lambda: tableize(record_type.__name__))

    def alias(self) -> str:
        """The explicit alias, or the table name with dots replaced."""
        return self.as_name or self.table_name().replace(".", "_")

    def association_name(self) -> str:
        """Foreign-key column other tables use to point at this one."""
        return f"{singularize(self.table_name())}_id"

    # --- Columns ---

    def columns(self) -> Columns:
        """Column set for the wrapped value, qualified by the alias if any."""
        table_name = self.table_name()
        id_field = IDField(name=self.id_field(), writeable=not self.using_auto_increment())
        if isinstance(self.value, str):
            return Columns(table_name, self.as_name, id_field)
        return for_type_with_alias(
            self.record_type(), table_name, self.as_name, id_field, self._registry
        )

    # --- Values ---

    def params(self, columns: Iterable[Column | str] | None = None) -> dict[str, Any]:
        """Named query parameters for the wrapped record, keyed by column.

        Values are read through the field's attribute path, so renamed
        (``db`` tag) and embedded fields resolve; UUID keys become strings.
        *columns* limits and orders the result; by default every persisted
        column is included.

        Raises:
            MissingFieldError: If a requested column has no backing field.
            NotARecordError: If the wrapped value is not a single record.
        """
        plan = self._plan()
        by_column: dict[str, FieldPlan] = {}
        for field_plan in plan.column_fields():
            by_column.setdefault(field_plan.column, field_plan)
        if columns is None:
            names = list(by_column)
        else:
            names = [c if isinstance(c, str) else c.name for c in columns]

        id_plan = plan.field(plan.id_attribute)
        values: dict[str, Any] = {}
        for name in names:
            field_plan = by_column.get(name)
            if field_plan is None:
                raise MissingFieldError(plan.record_type.__name__, name)
            value = self._get(field_plan)
            if field_plan is id_plan:
                value = self._key_kind(field_plan).to_param(value)
            values[name] = value
        return values

    # --- Primary key ---

    def id(self) -> Any:
        """Current primary-key value; UUID keys are returned as strings.

        Raises:
            MissingFieldError: If the record type has no primary key.
            NotARecordError: If the wrapped value is not a single record.
        """
        field_plan = self._id_plan()
        return self._key_kind(field_plan).to_param(self._get(field_plan))

    def id_field(self) -> str:
        """Column name of the primary key; ``"id"`` when it cannot be determined."""
        if isinstance(self.value, str):
            return _DEFAULT_ID_FIELD
        try:
            field_plan = self._id_plan()
        except MetadataError:
            return _DEFAULT_ID_FIELD
        if field_plan.skip:
            return _DEFAULT_ID_FIELD
        return field_plan.column

    def _declared_type(self, field_plan: FieldPlan) -> type | None:
        if isinstance(field_plan.annotation, type):
            return field_plan.annotation
        try:
            value = self._get(field_plan)
        except MetadataError:
            return None
        return None if value is None else type(value)

    def _key_kind(self, field_plan: FieldPlan) -> KeyKind:
        return KeyKind.for_type(self._declared_type(field_plan))

    def primary_key_type(self) -> str:
        """Declared type name of the primary key, e.g. ``"int"`` or ``"UUID"``.

        Raises:
            MissingFieldError: If the record type has no primary key.
        """
        field_plan = self._id_plan()
        declared = self._declared_type(field_plan)
        if declared is None:
            return str(field_plan.annotation or "")
        return declared.__name__

    def primary_key_kind(self) -> KeyKind:
        return self._key_kind(self._id_plan())

    def using_auto_increment(self) -> bool:
        """False only when the primary key is tagged ``no_auto_increment="true"``."""
        try:
            field_plan = self._id_plan()
        except MetadataError:
            return True
        return field_plan.no_auto_increment != "true"

    def where_id(self) -> str:
        return f"{self.alias()}.{self.id_field()} = ?"

    def where_named_id(self) -> str:
        id_field = self.id_field()
        return f"{self.alias()}.{id_field} = :{id_field}"

    # --- Mutation ---

    def _optional_field(self, attribute: str) -> FieldPlan | None:
        try:
            return self._field(attribute)
        except MetadataError:
            return None

    def set_id(self, value: Any) -> None:
        """Assign the primary key; integer keys are coerced with ``int()``.

        No-op when the record type has no primary key.
        """
        if self.is_collection():
            raise NotARecordError(type(self.value).__name__)
        field_plan = self._optional_field(self._id_attribute())
        if field_plan is None:
            return
        self._set(field_plan, self._key_kind(field_plan).coerce(value))

    def _id_attribute(self) -> str:
        try:
            return self._plan().id_attribute
        except MetadataError:
            return get_settings().id_attribute

    def _stamp(self, attribute: str, now: datetime, overwrite: bool) -> None:
        if self.is_collection():
            self.iterate(lambda child: child._stamp(attribute, now, overwrite))
            return
        field_plan = self._optional_field(attribute)
        if field_plan is None:
            return
        try:
            current = self._get(field_plan)
        except MetadataError:
            return
        if not overwrite and not _is_zero(current):
            return
        epoch = (isinstance(current, int) and not isinstance(current, bool)) or (
            field_plan.annotation is int
        )
        self._set(field_plan, int(now.timestamp()) if epoch else now)

    def set_created_at(self, now: datetime) -> None:
        """Stamp the creation time unless one is already set."""
        self._stamp(get_settings().created_at_attribute, now, overwrite=False)

    def set_updated_at(self, now: datetime) -> None:
        """Stamp the modification time, overwriting any previous value."""
        self._stamp(get_settings().updated_at_attribute, now, overwrite=True)

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return clock_hook.now()

    def touch_created_at(self) -> None:
        self.set_created_at(self.now())

    def touch_updated_at(self) -> None:
        self.set_updated_at(self.now())

    # --- Iteration ---

    def iterate(self, fn: ModelIterable) -> None:
        """Call *fn* with a Model per element, or once with self.

        Children share this model's context, clock and registry but carry
        no alias. The first exception raised by *fn* stops iteration and
        propagates.
        """
        if not self.is_collection():
            fn(self)
            return
        for element in self.value:
            fn(
                Model(
                    element,
                    self.ctx,
                    record_type=self._record_type,
                    clock=self._clock,
                    registry=self._registry,
                )
            )
