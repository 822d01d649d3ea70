"""Column layer - names and SQL fragments of persisted fields."""

from __future__ import annotations

from row_model.columns.column import Column
from row_model.columns.columns import Columns, IDField, ReadableColumns, WriteableColumns
from row_model.columns.for_type import for_type, for_type_with_alias

__all__ = [
    "Column",
    "Columns",
    "IDField",
    "ReadableColumns",
    "WriteableColumns",
    "for_type",
    "for_type_with_alias",
]
