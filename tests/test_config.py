"""Tests for configuration and logging setup."""

import io
from pathlib import Path

import pytest
from loguru import logger

from simple_sql.config import DEFAULT_DB_FILE, Config, load_config_from_env
from simple_sql.log import configure_logging


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.db_file == Path(DEFAULT_DB_FILE) == Path("database.db")
        assert config.max_query_length == 256
        assert config.log_level == "WARNING"

    def test_string_paths_converted(self):
        config = Config(db_file="x.db", history_file="hist", log_level="debug")
        assert config.db_file == Path("x.db")
        assert config.history_file == Path("hist")
        assert config.log_level == "DEBUG"

    def test_invalid_max_query_length(self):
        with pytest.raises(ValueError):
            Config(max_query_length=0)

    def test_from_env(self):
        config = load_config_from_env({
            "SIMPLE_SQL_DB_FILE": "/tmp/other.db",
            "SIMPLE_SQL_MAX_QUERY_LENGTH": "512",
            "SIMPLE_SQL_HISTORY_FILE": "",
            "SIMPLE_SQL_LOG_LEVEL": "info",
        })
        assert config.db_file == Path("/tmp/other.db")
        assert config.max_query_length == 512
        assert config.history_file is None
        assert config.log_level == "INFO"

    def test_from_empty_env(self):
        assert load_config_from_env({}) == Config()

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_from_env_bad_length(self, value):
        with pytest.raises(ValueError):
            load_config_from_env({"SIMPLE_SQL_MAX_QUERY_LENGTH": value})


class TestLogging:
    def test_configure_logging_enables_package_records(self):
        sink = io.StringIO()
        handler_id = configure_logging("DEBUG", sink=sink)
        try:
            from simple_sql.parsing.query_parser import QueryParser

            QueryParser().parse("SAVE")
        finally:
            logger.remove(handler_id)
            logger.disable("simple_sql")

        assert "Parsed 'SAVE'" in sink.getvalue()

    def test_level_filters(self):
        sink = io.StringIO()
        handler_id = configure_logging("WARNING", sink=sink)
        try:
            from simple_sql.parsing.query_parser import QueryParser

            QueryParser().parse("SAVE")
        finally:
            logger.remove(handler_id)
            logger.disable("simple_sql")

        assert sink.getvalue() == ""

    def test_reconfigure_keeps_foreign_handlers(self):
        from simple_sql.parsing.query_parser import QueryParser

        app_sink = io.StringIO()
        app_id = logger.add(app_sink, level="DEBUG", format="{message}")
        first = io.StringIO()
        second = io.StringIO()
        configure_logging("DEBUG", sink=first)
        handler_id = configure_logging("DEBUG", sink=second)
        try:
            QueryParser().parse("SAVE")
        finally:
            logger.remove(handler_id)
            logger.remove(app_id)
            logger.disable("simple_sql")

        assert first.getvalue() == ""
        assert "Parsed 'SAVE'" in second.getvalue()
        assert "Parsed 'SAVE'" in app_sink.getvalue()
