"""The root aggregate holding every table."""

from __future__ import annotations

from typing import Iterator

from simple_sql.catalog import TableCatalog
from simple_sql.table import Table


class Database:
    """A set of tables owned through a single catalog.

    A Database is built explicitly and handed to the executor; loading a file
    produces a new Database that replaces the old one as a whole.
    """

    def __init__(self, catalog: TableCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else TableCatalog()

    @property
    def table_count(self) -> int:
        return len(self.catalog)

    def __iter__(self) -> Iterator[Table]:
        return iter(self.catalog)

    def __repr__(self) -> str:
        return f"Database(tables={self.catalog.names()!r})"
