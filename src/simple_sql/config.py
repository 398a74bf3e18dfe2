"""Runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from simple_sql.parsing.query_parser import DEFAULT_MAX_QUERY_LENGTH

# Default filename for saving/loading the database
DEFAULT_DB_FILE = "database.db"


@dataclass
class Config:
    """Settings for a session."""

    db_file: Path = field(default_factory=lambda: Path(DEFAULT_DB_FILE))
    max_query_length: int = DEFAULT_MAX_QUERY_LENGTH
    history_file: Path | None = field(default_factory=lambda: Path.home() / ".simple_sql_history")
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if isinstance(self.db_file, str):
            self.db_file = Path(self.db_file)
        if isinstance(self.history_file, str):
            self.history_file = Path(self.history_file)
        if self.max_query_length <= 0:
            raise ValueError(f"max_query_length must be positive, got {self.max_query_length}")
        self.log_level = self.log_level.upper()


def load_config_from_env(environ: dict[str, str] | None = None) -> Config:
    """Build a Config, overriding defaults from SIMPLE_SQL_* environment variables."""
    env = os.environ if environ is None else environ
    config = Config()

    if env.get("SIMPLE_SQL_DB_FILE"):
        config.db_file = Path(env["SIMPLE_SQL_DB_FILE"])
    if env.get("SIMPLE_SQL_MAX_QUERY_LENGTH"):
        value = env["SIMPLE_SQL_MAX_QUERY_LENGTH"]
        try:
            config.max_query_length = int(value)
        except ValueError:
            raise ValueError(f"SIMPLE_SQL_MAX_QUERY_LENGTH must be an integer, got {value!r}") from None
        if config.max_query_length <= 0:
            raise ValueError(f"SIMPLE_SQL_MAX_QUERY_LENGTH must be positive, got {value!r}")
    if "SIMPLE_SQL_HISTORY_FILE" in env:
        # An empty value turns history off
        value = env["SIMPLE_SQL_HISTORY_FILE"]
        config.history_file = Path(value) if value else None
    if env.get("SIMPLE_SQL_LOG_LEVEL"):
        config.log_level = env["SIMPLE_SQL_LOG_LEVEL"].upper()

    return config
