"""A single mapped column and the SQL fragments derived from it."""

from __future__ import annotations

import re
from dataclasses import dataclass

from row_model.core.exceptions import InvalidColumnError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Column:
    """One persisted field.

    Attributes:
        name: Database column identifier.
        alias: Table or alias qualifier used in multi-table queries.
        writeable: Included in INSERT/UPDATE column lists.
        readable: Included in SELECT column lists.
        select_sql: Custom SELECT expression replacing ``alias.name``.
    """

    name: str
    alias: str = ""
    writeable: bool = True
    readable: bool = True
    select_sql: str | None = None

    def __post_init__(self) -> None:
        if not _IDENTIFIER.match(self.name):
            raise InvalidColumnError(self.name)

    def bare(self) -> str:
        return self.name

    def update_string(self) -> str:
        """Named-placeholder assignment, e.g. ``name = :name``."""
        return f"{self.name} = :{self.name}"

    def qualified(self) -> str:
        """``alias.name``, or just ``name`` when no alias is set."""
        if not self.alias:
            return self.name
        return f"{self.alias}.{self.name}"

    def select_string(self) -> str:
        return self.select_sql or self.qualified()
