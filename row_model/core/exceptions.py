"""RowModel exception hierarchy.

All failures raised by this package derive from RowModelError so the
surrounding persistence layer can catch them in one place.
"""

from __future__ import annotations


class RowModelError(Exception):
    """Base exception for all RowModel errors."""


# --- Metadata ---


class MetadataError(RowModelError):
    """Base for record metadata errors."""


class MissingFieldError(MetadataError):
    """Raised when a record type lacks a field an operation requires."""

    def __init__(self, model_name: str, field_name: str) -> None:
        self.model_name = model_name
        self.field_name = field_name
        super().__init__(f"Model {model_name} is missing required field '{field_name}'")


class NotARecordError(MetadataError):
    """Raised when a field lookup is attempted against a non-record value."""

    def __init__(self, value_type: str) -> None:
        self.value_type = value_type
        super().__init__(f"Model value of type {value_type} is not a record")


class UnknownRecordTypeError(MetadataError):
    """Raised when the element type of an empty collection cannot be determined."""

    def __init__(self) -> None:
        super().__init__(
            "Cannot determine the record type of an empty collection; "
            "pass record_type= when wrapping it"
        )


class DeclarationError(MetadataError):
    """Raised when an explicit record declaration is invalid."""


# --- Columns ---


class ColumnError(RowModelError):
    """Base for column errors."""


class InvalidColumnError(ColumnError):
    """Raised when a column name is not a valid identifier."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid column name: '{name}'")
