"""Query executor applying parsed queries to a Database."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from simple_sql.database import Database
from simple_sql.errors import SimpleSQLError
from simple_sql.parsing.query_parser import (
    CreateTableQuery,
    ExitQuery,
    InsertQuery,
    LoadQuery,
    Query,
    SaveQuery,
    SelectQuery,
)
from simple_sql.persistence import load_database, save_database


@dataclass
class QueryResult:
    """Result of a query execution.

    A plain QueryResult with a message is an error report.
    """

    columns: list[str]
    rows: list[list[str]]
    message: str | None = None


@dataclass
class CreateResult(QueryResult):
    """Result of a CREATE TABLE query."""

    table: str = ""


@dataclass
class InsertResult(QueryResult):
    """Result of an INSERT INTO query."""

    table: str = ""
    row_count: int = 0


@dataclass
class SelectResult(QueryResult):
    """Result of a SELECT query, with the rendered table text."""

    table: str = ""
    text: str = ""


@dataclass
class SaveResult(QueryResult):
    """Result of a SAVE query."""

    path: str = ""


@dataclass
class LoadResult(QueryResult):
    """Result of a LOAD query."""

    path: str = ""
    table_count: int = 0


@dataclass
class ExitResult(QueryResult):
    """Result of an EXIT query - signals the caller to stop reading input."""

    pass


class QueryExecutor:
    """Executes queries against a Database, one at a time."""

    def __init__(self, database: Database, db_file: Path | str) -> None:
        self.database = database
        self.db_file = Path(db_file)
        self._lock = threading.Lock()

    def execute(self, query: Query) -> QueryResult:
        """Execute a query and return its result.

        Errors from the catalog or the codec come back as a QueryResult with
        the error message; they never escape.
        """
        with self._lock:
            try:
                return self._dispatch(query)
            except SimpleSQLError as e:
                logger.debug("{} failed: {}", type(query).__name__, e)
                return QueryResult(columns=[], rows=[], message=str(e))

    def _dispatch(self, query: Query) -> QueryResult:
        if isinstance(query, CreateTableQuery):
            return self._execute_create_table(query)
        elif isinstance(query, InsertQuery):
            return self._execute_insert(query)
        elif isinstance(query, SelectQuery):
            return self._execute_select(query)
        elif isinstance(query, SaveQuery):
            return self._execute_save(query)
        elif isinstance(query, LoadQuery):
            return self._execute_load(query)
        elif isinstance(query, ExitQuery):
            return ExitResult(columns=[], rows=[])
        else:
            return QueryResult(columns=[], rows=[], message="Unsupported query.")

    def _execute_create_table(self, query: CreateTableQuery) -> CreateResult:
        """Execute CREATE TABLE query."""
        table = self.database.catalog.create(query.name, query.columns)
        return CreateResult(
            columns=[],
            rows=[],
            message=f"Table '{table.name}' with {table.column_count} columns created successfully.",
            table=table.name,
        )

    def _execute_insert(self, query: InsertQuery) -> InsertResult:
        """Execute INSERT INTO query."""
        table = self.database.catalog.insert(query.table, query.values)
        return InsertResult(
            columns=[],
            rows=[],
            message=f"Row inserted into table '{table.name}'.",
            table=table.name,
            row_count=table.row_count,
        )

    def _execute_select(self, query: SelectQuery) -> SelectResult:
        """Execute SELECT * FROM query."""
        catalog = self.database.catalog
        text = catalog.render(query.table)
        table = catalog.get(query.table)
        return SelectResult(
            columns=table.column_names,
            rows=list(table.rows()),
            table=table.name,
            text=text,
        )

    def _execute_save(self, query: SaveQuery) -> SaveResult:
        """Execute SAVE query."""
        save_database(self.database, self.db_file)
        return SaveResult(
            columns=[],
            rows=[],
            message=f"Database saved to '{self.db_file}'.",
            path=str(self.db_file),
        )

    def _execute_load(self, query: LoadQuery) -> LoadResult:
        """Execute LOAD query.

        The current database is replaced only after the whole file has been
        read; on any failure it stays as it was.
        """
        loaded = load_database(self.db_file)
        self.database = loaded
        return LoadResult(
            columns=[],
            rows=[],
            message=f"Database loaded from '{self.db_file}'.",
            path=str(self.db_file),
            table_count=loaded.table_count,
        )

