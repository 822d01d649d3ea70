"""Column set construction from record metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING

from row_model.columns.columns import Columns, IDField
from row_model.core.logging import get_logger

if TYPE_CHECKING:
    from row_model.mapping.registry import RecordRegistry

logger = get_logger(__name__)


def for_type(
    record_type: type,
    table_name: str,
    id_field: IDField | None = None,
    registry: RecordRegistry | None = None,
) -> Columns:
    """Column set for *record_type* qualified by its table name."""
    return for_type_with_alias(record_type, table_name, "", id_field, registry)


def for_type_with_alias(
    record_type: type,
    table_name: str,
    alias: str,
    id_field: IDField | None = None,
    registry: RecordRegistry | None = None,
) -> Columns:
    """Column set for *record_type* qualified by *alias* (or the table name).

    One column per persistable field in declaration order; skipped and
    association fields are left out and embedded records are flattened.
    The primary-key column takes ``id_field.writeable``. A type without
    eligible fields yields an empty set.
    """
    from row_model.mapping.registry import default_registry

    if registry is None:
        registry = default_registry
    id_field = id_field or IDField()

    def build() -> Columns:
        plan = registry.plan_for(record_type)
        cols = Columns(table_name, alias, id_field)
        for field_plan in plan.column_fields():
            cols.add(field_plan.column_spec)
            if field_plan.select:
                cols.set_select_sql(field_plan.column, field_plan.select)
        logger.debug(
            "columns_built",
            record_type=record_type.__qualname__,
            table=table_name,
            alias=alias,
            columns=cols.names,
        )
        return cols

    return registry.columns((record_type, table_name, alias, id_field), build)
