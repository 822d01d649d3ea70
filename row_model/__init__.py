"""RowModel - model metadata and column mapping for SQL persistence layers."""

from __future__ import annotations

from row_model.columns import (
    Column,
    Columns,
    IDField,
    ReadableColumns,
    WriteableColumns,
    for_type,
    for_type_with_alias,
)
from row_model.core.clock import now, reset_now_func, set_now_func
from row_model.core.context import Context
from row_model.core.enums import KeyKind
from row_model.core.exceptions import (
    ColumnError,
    DeclarationError,
    InvalidColumnError,
    MetadataError,
    MissingFieldError,
    NotARecordError,
    RowModelError,
    UnknownRecordTypeError,
)
from row_model.core.logging import configure_logging, get_logger
from row_model.core.naming import pluralize, singularize, tableize, underscore
from row_model.core.settings import RowModelSettings, get_settings
from row_model.mapping import (
    Model,
    RecordRegistry,
    TableNameAble,
    TableNameAbleWithContext,
    Tags,
    declare,
)

__all__ = [
    # Model
    "Model",
    "Context",
    "KeyKind",
    # Columns
    "Column",
    "Columns",
    "IDField",
    "ReadableColumns",
    "WriteableColumns",
    "for_type",
    "for_type_with_alias",
    # Metadata
    "Tags",
    "declare",
    "RecordRegistry",
    "TableNameAble",
    "TableNameAbleWithContext",
    # Naming
    "pluralize",
    "singularize",
    "tableize",
    "underscore",
    # Clock
    "now",
    "set_now_func",
    "reset_now_func",
    # Settings / logging
    "RowModelSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Exceptions
    "RowModelError",
    "MetadataError",
    "MissingFieldError",
    "NotARecordError",
    "UnknownRecordTypeError",
    "DeclarationError",
    "ColumnError",
    "InvalidColumnError",
]
