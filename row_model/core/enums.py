"""Primary-key kind enumeration."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any


class KeyKind(Enum):
    """Supported primary-key representations."""

    INTEGER = "integer"
    UUID = "uuid"
    STRING = "string"
    OTHER = "other"

    @classmethod
    def for_type(cls, tp: Any) -> KeyKind:
        """Classify a declared attribute type."""
        if not isinstance(tp, type):
            return cls.OTHER
        # bool is an int subclass but never a usable key
        if issubclass(tp, bool):
            return cls.OTHER
        if issubclass(tp, int):
            return cls.INTEGER
        if issubclass(tp, uuid.UUID):
            return cls.UUID
        if issubclass(tp, str):
            return cls.STRING
        return cls.OTHER

    def coerce(self, value: Any) -> Any:
        """Convert *value* for assignment to a key of this kind."""
        if self is KeyKind.INTEGER:
            return int(value)
        return value

    def to_param(self, value: Any) -> Any:
        """Convert a key value to the form bound as a SQL parameter."""
        if self is KeyKind.UUID and value is not None:
            return str(value)
        return value
