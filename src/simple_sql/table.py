"""In-memory column storage for a single table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

from simple_sql.constraints import check_value
from simple_sql.errors import ArityMismatchError, EmptySchemaError


@dataclass
class Column:
    """A named sequence of cell values."""

    name: str
    cells: list[str] = field(default_factory=list)


class Table:
    """A named table whose columns always hold the same number of cells."""

    def __init__(self, name: str, column_names: Sequence[str]) -> None:
        if not column_names:
            raise EmptySchemaError(name)
        self._name = name
        self._columns = [Column(column_name) for column_name in column_names]
        self._row_count = 0

    @classmethod
    def from_columns(cls, name: str, columns: Sequence[Column]) -> Table:
        """Build a table from fully populated columns (used when loading).

        Raises:
            EmptySchemaError: If no columns are given.
            ValueError: If the columns hold different cell counts.
        """
        table = cls(name, [c.name for c in columns])
        counts = {len(c.cells) for c in columns}
        if len(counts) != 1:
            raise ValueError(f"Columns of table '{name}' have uneven cell counts")
        for target, source in zip(table._columns, columns):
            target.cells = list(source.cells)
        table._row_count = counts.pop()
        return table

    @property
    def name(self) -> str:
        return self._name

    @property
    def columns(self) -> tuple[Column, ...]:
        return tuple(self._columns)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self._columns]

    @property
    def column_count(self) -> int:
        return len(self._columns)

    @property
    def row_count(self) -> int:
        """Return the number of rows in the table."""
        return self._row_count

    def append_row(self, values: Sequence[str]) -> int:
        """Append one value to every column and return the new row index.

        Arity and column constraints are checked for every value before any
        cell is written, so a rejected row leaves the table untouched.
        """
        if len(values) != len(self._columns):
            raise ArityMismatchError(self._name, len(self._columns), len(values))
        for column, value in zip(self._columns, values):
            check_value(column.name, value)

        for column, value in zip(self._columns, values):
            column.cells.append(value)
        self._row_count += 1
        return self._row_count - 1

    def get_row(self, index: int) -> list[str]:
        """Get a row by index."""
        if index < 0 or index >= self._row_count:
            raise IndexError(f"Index {index} out of range [0, {self._row_count})")
        return [c.cells[index] for c in self._columns]

    def rows(self) -> Iterator[list[str]]:
        """Iterate over rows, cells in column order."""
        for index in range(self._row_count):
            yield [c.cells[index] for c in self._columns]

    def __repr__(self) -> str:
        return f"Table(name={self._name!r}, columns={self.column_names!r}, rows={self._row_count})"
