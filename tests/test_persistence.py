"""Tests for the binary save/load format."""

import os
import struct
import sys

import pytest

from simple_sql.database import Database
from simple_sql.errors import CorruptFormatError, StorageIOError
from simple_sql.persistence import MAGIC, VERSION, dumps, load_database, loads, save_database


def _string(value: bytes) -> bytes:
    data = value + b"\x00"
    return struct.pack("<i", len(data)) + data


def _sample_database() -> Database:
    db = Database()
    users = db.catalog.create("users", ["name", "IPv4"])
    users.append_row(["alice", "10.0.0.1"])
    users.append_row(["bob", "999.999.999.999"])
    db.catalog.create("empty", ["x", "y", "x"])
    notes = db.catalog.create("notes", ["text"])
    notes.append_row(["héllo wörld"])
    notes.append_row([""])
    return db


def _snapshot(db: Database) -> list:
    return [(t.name, t.column_names, list(t.rows())) for t in db]


class TestFormat:
    """Tests for the byte layout."""

    def test_empty_database(self):
        data = dumps(Database())
        assert data == MAGIC + struct.pack("<H", VERSION) + struct.pack("<i", 0)

    def test_layout_is_column_major(self):
        db = Database()
        table = db.catalog.create("t", ["a", "b"])
        table.append_row(["1", "2"])
        table.append_row(["3", "4"])

        expected = (
            MAGIC
            + struct.pack("<H", 1)
            + struct.pack("<i", 1)
            + _string(b"t")
            + struct.pack("<ii", 2, 2)
            + _string(b"a") + _string(b"1") + _string(b"3")
            + _string(b"b") + _string(b"2") + _string(b"4")
        )
        assert dumps(db) == expected

    def test_string_length_includes_terminator(self):
        db = Database()
        db.catalog.create("abc", ["c"])
        data = dumps(db)
        offset = len(MAGIC) + 2 + 4
        assert struct.unpack_from("<i", data, offset)[0] == 4
        assert data[offset + 4:offset + 8] == b"abc\x00"

    def test_round_trip(self):
        db = _sample_database()
        restored = loads(dumps(db))
        assert _snapshot(restored) == _snapshot(db)

    def test_headerless_layout_still_loads(self):
        data = (
            struct.pack("<i", 1)
            + _string(b"t")
            + struct.pack("<ii", 1, 1)
            + _string(b"a") + _string(b"v")
        )
        db = loads(data)
        assert _snapshot(db) == [("t", ["a"], [["v"]])]


class TestCorruptData:
    """Malformed input is rejected as a whole."""

    def _valid(self) -> bytes:
        return dumps(_sample_database())

    def test_truncated_everywhere(self):
        data = self._valid()
        for size in range(len(data)):
            with pytest.raises(CorruptFormatError):
                loads(data[:size])

    def test_trailing_bytes(self):
        with pytest.raises(CorruptFormatError, match="trailing"):
            loads(self._valid() + b"\x00")

    def test_unknown_version(self):
        data = MAGIC + struct.pack("<H", 99) + struct.pack("<i", 0)
        with pytest.raises(CorruptFormatError, match="version"):
            loads(data)

    def test_negative_count(self):
        data = MAGIC + struct.pack("<H", VERSION) + struct.pack("<i", -1)
        with pytest.raises(CorruptFormatError, match="Negative"):
            loads(data)

    def test_huge_table_count(self):
        data = MAGIC + struct.pack("<H", VERSION) + struct.pack("<i", 1_000_000) + _string(b"t")
        with pytest.raises(CorruptFormatError):
            loads(data)

    def test_huge_row_count(self):
        data = (
            MAGIC + struct.pack("<H", VERSION) + struct.pack("<i", 1)
            + _string(b"t") + struct.pack("<ii", 1, 2_000_000_000) + _string(b"a")
        )
        with pytest.raises(CorruptFormatError):
            loads(data)

    def test_missing_terminator(self):
        data = (
            MAGIC + struct.pack("<H", VERSION) + struct.pack("<i", 1)
            + struct.pack("<i", 1) + b"t"
            + struct.pack("<ii", 1, 0) + _string(b"a")
        )
        with pytest.raises(CorruptFormatError, match="Unterminated"):
            loads(data)

    def test_zero_columns(self):
        data = MAGIC + struct.pack("<H", VERSION) + struct.pack("<i", 1) + _string(b"t") + struct.pack("<ii", 0, 0)
        with pytest.raises(CorruptFormatError, match="no columns"):
            loads(data)

    def test_duplicate_table_names(self):
        table = _string(b"t") + struct.pack("<ii", 1, 0) + _string(b"a")
        data = MAGIC + struct.pack("<H", VERSION) + struct.pack("<i", 2) + table + table
        with pytest.raises(CorruptFormatError, match="Duplicate"):
            loads(data)

    def test_invalid_utf8(self):
        data = (
            MAGIC + struct.pack("<H", VERSION) + struct.pack("<i", 1)
            + _string(b"\xff\xfe") + struct.pack("<ii", 1, 0) + _string(b"a")
        )
        with pytest.raises(CorruptFormatError, match="UTF-8"):
            loads(data)


class TestFiles:
    """Tests for saving to and loading from disk."""

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "database.db"
        db = _sample_database()

        save_database(db, path)
        restored = load_database(path)

        assert _snapshot(restored) == _snapshot(db)
        assert list(tmp_path.iterdir()) == [path]

    def test_save_overwrites(self, tmp_path):
        path = tmp_path / "database.db"
        save_database(_sample_database(), path)
        save_database(Database(), path)

        assert load_database(path).table_count == 0

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX file modes")
    def test_saved_file_follows_umask(self, tmp_path):
        path = tmp_path / "database.db"
        old_mask = os.umask(0o022)
        try:
            save_database(_sample_database(), path)
        finally:
            os.umask(old_mask)

        assert path.stat().st_mode & 0o777 == 0o644

    def test_save_to_missing_directory(self, tmp_path):
        with pytest.raises(StorageIOError, match="for writing"):
            save_database(Database(), tmp_path / "missing" / "database.db")

    def test_failed_save_keeps_previous_file(self, tmp_path):
        path = tmp_path / "database.db"
        save_database(_sample_database(), path)
        before = path.read_bytes()

        # A directory in the way of the rename makes the save fail
        blocked = tmp_path / "blocked.db"
        blocked.mkdir()
        with pytest.raises(StorageIOError):
            save_database(Database(), blocked)

        assert path.read_bytes() == before
        assert sorted(p.name for p in tmp_path.iterdir()) == ["blocked.db", "database.db"]

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(StorageIOError, match="for reading"):
            load_database(tmp_path / "nope.db")

    def test_load_corrupt_file(self, tmp_path):
        path = tmp_path / "database.db"
        path.write_bytes(b"garbage")
        with pytest.raises(CorruptFormatError, match="Corrupt database file"):
            load_database(path)
