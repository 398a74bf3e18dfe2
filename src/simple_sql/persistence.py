"""Binary save/load of a whole Database.

Layout (little-endian, no padding)::

    magic         4 bytes  b"SSQL"
    version       uint16   1
    table_count   int32
    per table:
        name          string
        column_count  int32
        row_count     int32
        per column:
            name      string
            row_count x string (cells, column-major)

A string is an int32 length followed by that many bytes: the UTF-8 text and
a trailing NUL, which the length includes.

Files that start without the magic bytes are read as the headerless layout
written by earlier releases (version 0).
"""

from __future__ import annotations

import os
import struct
import tempfile
from pathlib import Path

from loguru import logger

from simple_sql.catalog import TableCatalog
from simple_sql.database import Database
from simple_sql.errors import CorruptFormatError, DuplicateTableError, StorageIOError
from simple_sql.table import Column, Table

MAGIC = b"SSQL"
VERSION = 1

_INT32 = struct.Struct("<i")
_UINT16 = struct.Struct("<H")


def _pack_string(value: str) -> bytes:
    data = value.encode("utf-8") + b"\x00"
    return _INT32.pack(len(data)) + data


def dumps(database: Database) -> bytes:
    """Serialize a database to bytes."""
    parts = [MAGIC, _UINT16.pack(VERSION), _INT32.pack(database.table_count)]
    for table in database:
        parts.append(_pack_string(table.name))
        parts.append(_INT32.pack(table.column_count))
        parts.append(_INT32.pack(table.row_count))
        for column in table.columns:
            parts.append(_pack_string(column.name))
            for cell in column.cells:
                parts.append(_pack_string(cell))
    return b"".join(parts)


class _Reader:
    """Bounds-checked cursor over a byte buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read(self, size: int, what: str) -> bytes:
        if size > self.remaining:
            raise CorruptFormatError(
                f"Unexpected end of data reading {what} at offset {self._pos}"
            )
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def read_count(self, what: str) -> int:
        value = _INT32.unpack(self.read(_INT32.size, what))[0]
        if value < 0:
            raise CorruptFormatError(f"Negative {what}: {value}")
        return value

    def read_string(self, what: str) -> str:
        length = self.read_count(f"{what} length")
        if length == 0:
            raise CorruptFormatError(f"Zero-length {what} (missing terminator)")
        raw = self.read(length, what)
        if raw[-1:] != b"\x00":
            raise CorruptFormatError(f"Unterminated {what}")
        try:
            return raw[:-1].decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptFormatError(f"Invalid UTF-8 in {what}: {e}") from e


def loads(data: bytes) -> Database:
    """Deserialize a database from bytes.

    The result is built on its own and returned only when the whole buffer
    has been read without inconsistencies.

    Raises:
        CorruptFormatError: If the data does not follow the layout.
    """
    reader = _Reader(data)
    if data[:len(MAGIC)] == MAGIC:
        reader.read(len(MAGIC), "magic")
        version = _UINT16.unpack(reader.read(_UINT16.size, "version"))[0]
        if version != VERSION:
            raise CorruptFormatError(f"Unsupported database file version: {version}")

    catalog = TableCatalog()
    table_count = reader.read_count("table count")
    # Every table needs at least a name, two counts and one column name
    if table_count * 4 * _INT32.size > reader.remaining:
        raise CorruptFormatError(f"Table count {table_count} exceeds remaining data")

    for _ in range(table_count):
        name = reader.read_string("table name")
        column_count = reader.read_count("column count")
        row_count = reader.read_count("row count")
        if column_count == 0:
            raise CorruptFormatError(f"Table '{name}' has no columns")
        if column_count * (row_count + 1) * _INT32.size > reader.remaining:
            raise CorruptFormatError(
                f"Table '{name}' declares {column_count} columns x {row_count} rows "
                f"but only {reader.remaining} bytes remain"
            )

        columns = []
        for _ in range(column_count):
            column = Column(reader.read_string("column name"))
            column.cells = [reader.read_string("cell value") for _ in range(row_count)]
            columns.append(column)

        try:
            catalog.add(Table.from_columns(name, columns))
        except DuplicateTableError as e:
            raise CorruptFormatError(f"Duplicate table name '{name}'") from e

    if reader.remaining:
        raise CorruptFormatError(f"{reader.remaining} unexpected trailing bytes")
    return Database(catalog)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def save_database(database: Database, path: Path | str) -> None:
    """Write a database to a file.

    The data goes to a temporary file in the same directory which then
    replaces the target, so an earlier save survives a failed one.

    Raises:
        StorageIOError: If the file cannot be written.
    """
    path = Path(path)
    data = dumps(database)
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; give the file the mode open() would
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise StorageIOError(f"Could not open file '{path}' for writing.") from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.info("Saved {} tables ({} bytes) to {}", database.table_count, len(data), path)


def load_database(path: Path | str) -> Database:
    """Read a database from a file.

    Raises:
        StorageIOError: If the file cannot be read.
        CorruptFormatError: If the contents are malformed.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise StorageIOError(f"Could not open file '{path}' for reading.") from e

    try:
        database = loads(data)
    except CorruptFormatError as e:
        raise CorruptFormatError(f"Corrupt database file '{path}': {e}") from e

    logger.info("Loaded {} tables from {}", database.table_count, path)
    return database
