"""Exceptions raised by the simple_sql core."""

from __future__ import annotations


class SimpleSQLError(Exception):
    """Base class for every error reported back to the user."""


class ParseError(SimpleSQLError):
    """A query line could not be parsed.

    The message is the human-readable reason, e.g. ``Table name is missing.``
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class DuplicateTableError(SimpleSQLError):
    def __init__(self, table: str) -> None:
        super().__init__(f"Table '{table}' already exists.")
        self.table = table


class NoSuchTableError(SimpleSQLError):
    def __init__(self, table: str) -> None:
        super().__init__(f"Table '{table}' does not exist.")
        self.table = table


class EmptySchemaError(SimpleSQLError):
    def __init__(self, table: str) -> None:
        super().__init__(f"No columns defined for table '{table}'.")
        self.table = table


class ArityMismatchError(SimpleSQLError):
    def __init__(self, table: str, expected: int, got: int) -> None:
        super().__init__(
            f"Column count mismatch for table '{table}' (expected {expected}, got {got})."
        )
        self.table = table
        self.expected = expected
        self.got = got


class InvalidConstraintError(SimpleSQLError):
    def __init__(self, column: str, value: str) -> None:
        super().__init__(f"Invalid {column} address '{value}'.")
        self.column = column
        self.value = value


class StorageIOError(SimpleSQLError):
    """The database file could not be opened, read or written."""


class CorruptFormatError(SimpleSQLError):
    """The database file does not follow the binary layout."""
