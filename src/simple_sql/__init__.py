"""Simple SQL - a tiny SQL-like table store with binary save/load."""

from loguru import logger

from simple_sql.catalog import TableCatalog
from simple_sql.config import Config, load_config_from_env
from simple_sql.constraints import validate_ipv4
from simple_sql.database import Database
from simple_sql.errors import (
    ArityMismatchError,
    CorruptFormatError,
    DuplicateTableError,
    EmptySchemaError,
    InvalidConstraintError,
    NoSuchTableError,
    ParseError,
    SimpleSQLError,
    StorageIOError,
)
from simple_sql.parsing import QueryParser
from simple_sql.persistence import load_database, save_database
from simple_sql.query_executor import QueryExecutor, QueryResult
from simple_sql.table import Column, Table

# Silent unless the application opts in via simple_sql.log.configure_logging
logger.disable("simple_sql")

__all__ = [
    # Main API
    "Database",
    "QueryParser",
    "QueryExecutor",
    "QueryResult",
    # Storage
    "TableCatalog",
    "Table",
    "Column",
    "validate_ipv4",
    "save_database",
    "load_database",
    # Configuration
    "Config",
    "load_config_from_env",
    # Errors
    "SimpleSQLError",
    "ParseError",
    "DuplicateTableError",
    "NoSuchTableError",
    "EmptySchemaError",
    "ArityMismatchError",
    "InvalidConstraintError",
    "StorageIOError",
    "CorruptFormatError",
]

__version__ = "0.1.0"
