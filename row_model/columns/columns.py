"""Ordered, duplicate-free column sets."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from row_model.columns.column import Column


@dataclass(frozen=True)
class IDField:
    """Primary-key column name and whether callers may write it."""

    name: str = "id"
    writeable: bool = False


class Columns:
    """Columns of one table reference, in declaration order.

    Args:
        table_name: Name of the table the columns belong to.
        table_alias: Qualifier used in fragments; defaults to the table name.
        id_field: Primary-key column; its writeability is applied when a
            column of the same name is added without an explicit rw flag.
    """

    def __init__(
        self,
        table_name: str,
        table_alias: str = "",
        id_field: IDField | None = None,
    ) -> None:
        self.table_name = table_name
        self.table_alias = table_alias
        self.id_field = id_field or IDField()
        self._cols: dict[str, Column] = {}

    @property
    def qualifier(self) -> str:
        return self.table_alias or self.table_name

    def add(self, *specs: str) -> list[Column]:
        """Add columns given as ``"name"``, ``"name,r"`` or ``"name,w"``.

        ``r`` marks a read-only column and ``w`` a write-only one. Names
        already present are returned unchanged.

        Returns:
            The columns corresponding to *specs*, new or existing.
        """
        added: list[Column] = []
        for spec in specs:
            name, _, flag = (part.strip() for part in spec.partition(","))
            if not name:
                continue
            existing = self._cols.get(name)
            if existing is not None:
                added.append(existing)
                continue

            writeable = readable = True
            if flag == "r":
                writeable = False
            elif flag == "w":
                readable = False
            elif name == self.id_field.name:
                writeable = self.id_field.writeable

            col = Column(name=name, alias=self.qualifier, writeable=writeable, readable=readable)
            self._cols[name] = col
            added.append(col)
        return added

    def set_select_sql(self, name: str, sql: str) -> Column:
        """Replace a column's SELECT expression; the column becomes read-only."""
        col = dataclasses.replace(self._cols[name], select_sql=sql, writeable=False, readable=True)
        self._cols[name] = col
        return col

    def remove(self, *names: str) -> None:
        for name in names:
            self._cols.pop(name, None)

    def get(self, name: str) -> Column | None:
        return self._cols.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._cols)

    def string(self) -> str:
        """Comma-separated bare column names."""
        return ", ".join(self._cols)

    def symbolized_string(self) -> str:
        """Comma-separated named placeholders, e.g. ``:id, :name``."""
        return ", ".join(f":{name}" for name in self._cols)

    def writeable(self) -> WriteableColumns:
        return WriteableColumns(self, [c for c in self._cols.values() if c.writeable])

    def readable(self) -> ReadableColumns:
        return ReadableColumns(self, [c for c in self._cols.values() if c.readable])

    def copy(self) -> Columns:
        clone = Columns(self.table_name, self.table_alias, self.id_field)
        clone._cols = dict(self._cols)
        return clone

    def __contains__(self, name: object) -> bool:
        return name in self._cols

    def __iter__(self) -> Iterator[Column]:
        return iter(self._cols.values())

    def __len__(self) -> int:
        return len(self._cols)

    def __repr__(self) -> str:
        return f"Columns({self.qualifier!r}, {self.names!r})"


class _ColumnView:
    def __init__(self, parent: Columns, cols: list[Column]) -> None:
        self.parent = parent
        self.cols = cols

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.cols]

    def string(self) -> str:
        return ", ".join(self.names)

    def symbolized_string(self) -> str:
        return ", ".join(f":{c.name}" for c in self.cols)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.cols)

    def __len__(self) -> int:
        return len(self.cols)


class WriteableColumns(_ColumnView):
    """Columns that belong in INSERT and UPDATE statements."""

    def update_string(self) -> str:
        """``a = :a, b = :b`` for parameterized UPDATEs."""
        return ", ".join(c.update_string() for c in self.cols)

    def quoted_update_string(self, quoter: Callable[[str], str]) -> str:
        """Like :meth:`update_string` but with the left-hand names quoted."""
        return ", ".join(f"{quoter(c.name)} = :{c.name}" for c in self.cols)


class ReadableColumns(_ColumnView):
    """Columns that belong in SELECT statements."""

    def select_string(self) -> str:
        """``alias.a, alias.b`` honoring custom select expressions."""
        return ", ".join(c.select_string() for c in self.cols)
