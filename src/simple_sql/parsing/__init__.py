"""Parsing module for the query language."""

from simple_sql.parsing.query_parser import (
    CreateTableQuery,
    ExitQuery,
    InsertQuery,
    LoadQuery,
    Query,
    QueryParser,
    SaveQuery,
    SelectQuery,
)

__all__ = [
    "CreateTableQuery",
    "ExitQuery",
    "InsertQuery",
    "LoadQuery",
    "Query",
    "QueryParser",
    "SaveQuery",
    "SelectQuery",
]
