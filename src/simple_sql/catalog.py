"""Catalog of tables keyed by name."""

from __future__ import annotations

from typing import Iterator, Sequence

from loguru import logger

from simple_sql.errors import DuplicateTableError, EmptySchemaError, NoSuchTableError
from simple_sql.table import Table


class TableCatalog:
    """Ordered collection of tables with unique, case-sensitive names."""

    def __init__(self) -> None:
        self._tables: list[Table] = []

    def find(self, name: str) -> Table | None:
        """Find a table by exact name.

        Args:
            name: Table name (no case folding).

        Returns:
            The table, or None if no table has that name.
        """
        for table in self._tables:
            if table.name == name:
                return table
        return None

    def get(self, name: str) -> Table:
        """Like find, but raise NoSuchTableError when the table is missing."""
        table = self.find(name)
        if table is None:
            raise NoSuchTableError(name)
        return table

    def create(self, name: str, column_names: Sequence[str]) -> Table:
        """Create an empty table.

        Duplicate column names are kept as given.

        Args:
            name: Name of the new table.
            column_names: Column names, in order.

        Returns:
            The new table.

        Raises:
            DuplicateTableError: If a table with this name exists.
            EmptySchemaError: If no column names are given.
        """
        if self.find(name) is not None:
            raise DuplicateTableError(name)
        if not column_names:
            raise EmptySchemaError(name)
        table = Table(name, column_names)
        self._tables.append(table)
        logger.debug("Created table {} with columns {}", name, list(column_names))
        return table

    def insert(self, name: str, values: Sequence[str]) -> Table:
        """Append one row to a table.

        The row is written to every column or to none of them.

        Raises:
            NoSuchTableError: If the table does not exist.
            ArityMismatchError: If the value count differs from the column count.
            InvalidConstraintError: If a value fails its column's constraint.
        """
        table = self.get(name)
        table.append_row(values)
        return table

    def render(self, name: str) -> str:
        """Render a table as tab-separated text, header line first."""
        table = self.get(name)
        lines = ["\t".join(table.column_names)]
        lines.extend("\t".join(row) for row in table.rows())
        return "\n".join(lines)

    def add(self, table: Table) -> None:
        """Add an already-built table (used when loading)."""
        if self.find(table.name) is not None:
            raise DuplicateTableError(table.name)
        self._tables.append(table)

    def names(self) -> list[str]:
        """List table names in creation order."""
        return [t.name for t in self._tables]

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[Table]:
        return iter(self._tables)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None
