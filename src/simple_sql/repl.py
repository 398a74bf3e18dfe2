"""Interactive REPL and command-line entry point."""

from __future__ import annotations

import argparse
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path
from typing import Iterable, TextIO

from loguru import logger

from simple_sql.config import Config, load_config_from_env
from simple_sql.database import Database
from simple_sql.errors import ParseError
from simple_sql.log import configure_logging
from simple_sql.parsing.query_parser import QueryParser
from simple_sql.query_executor import (
    CreateResult,
    ExitResult,
    InsertResult,
    LoadResult,
    QueryExecutor,
    QueryResult,
    SaveResult,
    SelectResult,
)

PROMPT = "Enter SQL query: "


def print_result(result: QueryResult, file: TextIO | None = None) -> None:
    """Print a query result.

    Tables are printed as tab-separated lines, header first. Errors are
    prefixed with ``Error:``.
    """
    out = file if file is not None else sys.stdout
    if isinstance(result, ExitResult):
        return
    if isinstance(result, SelectResult):
        print(result.text, file=out)
        return
    if isinstance(result, (CreateResult, InsertResult, SaveResult, LoadResult)):
        if result.message:
            print(result.message, file=out)
        return
    if result.message:
        print(f"Error: {result.message}", file=out)


def execute_line(line: str, parser: QueryParser, executor: QueryExecutor) -> QueryResult | None:
    """Parse and execute one input line.

    Returns None for a blank line. Parse errors come back as an error result,
    like every other error.
    """
    line = line.strip()
    if not line:
        return None
    try:
        query = parser.parse(line)
    except ParseError as e:
        return QueryResult(columns=[], rows=[], message=e.reason)
    return executor.execute(query)


def run_lines(
    lines: Iterable[str],
    parser: QueryParser,
    executor: QueryExecutor,
    verbose: bool = False,
    file: TextIO | None = None,
) -> None:
    """Execute lines in order until they run out or one is EXIT.

    Blank lines and lines starting with ``--`` are skipped.
    """
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("--"):
            continue
        if verbose:
            print(f">>> {line}", file=file if file is not None else sys.stdout)
        result = execute_line(line, parser, executor)
        if result is None:
            continue
        if isinstance(result, ExitResult):
            break
        print_result(result, file)


def run_repl(config: Config, database: Database | None = None) -> int:
    """Run the interactive REPL."""
    print("Simple SQL-like Database")
    print("Supported commands: CREATE TABLE, INSERT INTO, SELECT * FROM, SAVE, LOAD, EXIT\n")

    parser = QueryParser(max_length=config.max_query_length)
    executor = QueryExecutor(database if database is not None else Database(), config.db_file)

    # Command history
    history_file = config.history_file
    if history_file is not None:
        try:
            readline.read_history_file(history_file)
        except OSError:
            pass

    try:
        while True:
            try:
                line = input(PROMPT).strip()
            except EOFError:
                print()
                break

            if not line:
                continue

            result = execute_line(line, parser, executor)
            if isinstance(result, ExitResult):
                break
            if result is not None:
                print_result(result)
    except KeyboardInterrupt:
        print()
    finally:
        if history_file is not None:
            try:
                readline.set_history_length(1000)
                readline.write_history_file(history_file)
            except OSError as e:
                logger.warning("Could not write history file {}: {}", history_file, e)

    return 0


def run_file(file_path: Path, config: Config, verbose: bool = False) -> int:
    """Execute queries from a file, one per line.

    Args:
        file_path: Path to the file containing queries
        config: Session configuration
        verbose: If True, print each query before executing

    Returns:
        0 once the script has run (query errors are reported inline), 1 if the
        file cannot be read
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    parser = QueryParser(max_length=config.max_query_length)
    executor = QueryExecutor(Database(), config.db_file)
    run_lines(content.splitlines(), parser, executor, verbose=verbose)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Interactive shell for a tiny SQL-like table store"
    )
    arg_parser.add_argument(
        "--db-file",
        type=Path,
        default=None,
        help="File used by SAVE and LOAD (default: database.db)",
    )
    arg_parser.add_argument(
        "--max-query-length",
        type=int,
        default=None,
        help="Reject query lines longer than this many bytes (default: 256)",
    )
    arg_parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level for diagnostics on stderr (default: WARNING)",
    )
    arg_parser.add_argument(
        "-c", "--command",
        action="append",
        default=None,
        help="Execute a command and exit (may be given several times)",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute queries from a file and exit",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print each query before executing (for -f/--file and -c)",
    )

    args = arg_parser.parse_args(argv)

    try:
        config = load_config_from_env()
        if args.db_file is not None:
            config.db_file = args.db_file
        if args.max_query_length is not None:
            if args.max_query_length <= 0:
                arg_parser.error("--max-query-length must be positive")
            config.max_query_length = args.max_query_length
        if args.log_level is not None:
            config.log_level = args.log_level.upper()
        # The CLI owns the process, so loguru's default stderr handler goes
        logger.remove()
        configure_logging(config.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug("Starting with {}", config)

    # Handle file execution
    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, config, args.verbose)

    if args.command:
        parser = QueryParser(max_length=config.max_query_length)
        executor = QueryExecutor(Database(), config.db_file)
        run_lines(args.command, parser, executor, verbose=args.verbose)
        return 0

    return run_repl(config)


if __name__ == "__main__":
    sys.exit(main())
