"""Parser for the simple_sql query language."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc
from loguru import logger

from simple_sql.errors import ParseError
from simple_sql.parsing.query_lexer import NAME_TOKENS, QueryLexer

DEFAULT_MAX_QUERY_LENGTH = 256


@dataclass
class CreateTableQuery:
    """A CREATE TABLE query."""

    name: str
    columns: list[str] = field(default_factory=list)


@dataclass
class InsertQuery:
    """An INSERT INTO query."""

    table: str
    values: list[str] = field(default_factory=list)


@dataclass
class SelectQuery:
    """A SELECT * FROM query."""

    table: str


@dataclass
class SaveQuery:
    """A SAVE query."""

    pass


@dataclass
class LoadQuery:
    """A LOAD query."""

    pass


@dataclass
class ExitQuery:
    """An EXIT query - signals the caller to end the session."""

    pass


Query = CreateTableQuery | InsertQuery | SelectQuery | SaveQuery | LoadQuery | ExitQuery


class _GrammarError(Exception):
    """Raised from p_error; turned into a ParseError with a specific reason."""


class QueryParser:
    """Parser for query lines."""

    tokens = QueryLexer.tokens

    def __init__(self, max_length: int = DEFAULT_MAX_QUERY_LENGTH) -> None:
        self.max_length = max_length
        self.lexer = QueryLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : create_table
                     | insert
                     | select"""
        p[0] = p[1]

    def p_statement_save(self, p: yacc.YaccProduction) -> None:
        """statement : SAVE"""
        p[0] = SaveQuery()

    def p_statement_load(self, p: yacc.YaccProduction) -> None:
        """statement : LOAD"""
        p[0] = LoadQuery()

    def p_statement_exit(self, p: yacc.YaccProduction) -> None:
        """statement : EXIT"""
        p[0] = ExitQuery()

    def p_create_table(self, p: yacc.YaccProduction) -> None:
        """create_table : CREATE TABLE name LPAREN item_list RPAREN"""
        columns = [item for item in p[5] if item]
        if not columns:
            raise ParseError(f"No columns defined for table '{p[3]}'.")
        p[0] = CreateTableQuery(name=p[3], columns=columns)

    def p_insert(self, p: yacc.YaccProduction) -> None:
        """insert : INSERT INTO name LPAREN item_list RPAREN"""
        values = [item for item in p[5] if item]
        if not values:
            raise ParseError(f"No values provided for table '{p[3]}'.")
        p[0] = InsertQuery(table=p[3], values=values)

    def p_select(self, p: yacc.YaccProduction) -> None:
        """select : SELECT STAR FROM name"""
        p[0] = SelectQuery(table=p[4])

    def p_name(self, p: yacc.YaccProduction) -> None:
        """name : NAME
                | CREATE
                | TABLE
                | INSERT
                | INTO
                | SELECT
                | FROM
                | SAVE
                | LOAD
                | EXIT"""
        p[0] = p[1]

    def p_item_list_single(self, p: yacc.YaccProduction) -> None:
        """item_list : item"""
        p[0] = [p[1]]

    def p_item_list_multiple(self, p: yacc.YaccProduction) -> None:
        """item_list : item_list COMMA item"""
        p[0] = p[1] + [p[3]]

    def p_item(self, p: yacc.YaccProduction) -> None:
        """item : ITEM"""
        p[0] = p[1]

    def p_item_empty(self, p: yacc.YaccProduction) -> None:
        """item : """
        p[0] = ""

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise _GrammarError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise _GrammarError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="statement", **kwargs)

    def parse(self, data: str) -> Query:
        """Parse one query line.

        Raises:
            ParseError: If the line is too long or malformed. The message names
                the specific problem.
        """
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        size = len(data.encode("utf-8"))
        if size > self.max_length:
            raise ParseError(
                f"Query exceeds maximum length of {self.max_length} bytes ({size} bytes)."
            )

        self.lexer.lexer.begin("INITIAL")
        try:
            query = self.parser.parse(data, lexer=self.lexer.lexer)
        except _GrammarError as e:
            reason = diagnose(self.lexer.tokenize(data)) or str(e)
            logger.debug("Rejected query {!r}: {}", data, reason)
            raise ParseError(reason) from e
        if query is None:
            raise ParseError("Unsupported query.")
        logger.debug("Parsed {!r} as {}", data, query)
        return query


_LIST_FORMS = {
    "CREATE": ("TABLE", "Invalid CREATE TABLE syntax.", "column definitions", "Missing column definitions."),
    "INSERT": ("INTO", "Invalid INSERT INTO syntax.", "values", "Missing values."),
}


def diagnose(tokens: list[Any]) -> str | None:
    """Explain why a token sequence is not a valid query.

    Checks run in the order the query is read, so the first missing piece is
    the one reported.
    """
    if not tokens:
        return "Unsupported query."

    types = [t.type for t in tokens]
    verb = types[0]

    if verb in _LIST_FORMS:
        keyword, bad_syntax, list_name, missing_list = _LIST_FORMS[verb]
        if len(types) < 2 or types[1] != keyword:
            return bad_syntax
        if len(types) < 3 or types[2] not in NAME_TOKENS:
            return "Table name is missing."
        if "LPAREN" not in types:
            if len(types) > 3:
                return f"Unexpected '{tokens[3].value}' after table name."
            return missing_list
        lparen = types.index("LPAREN")
        if lparen != 3:
            return f"Unexpected '{tokens[3].value}' before {list_name}."
        if "RPAREN" not in types[lparen:]:
            return f"Missing closing parenthesis in {list_name}."
        return None

    if verb == "SELECT":
        if types[1:3] != ["STAR", "FROM"]:
            return "Invalid SELECT syntax."
        if len(types) < 4 or types[3] not in NAME_TOKENS:
            return "Table name is missing in SELECT query."
        if len(types) > 4:
            return f"Unexpected '{tokens[4].value}' after table name in SELECT query."
        return None

    if verb in ("SAVE", "LOAD", "EXIT"):
        if len(tokens) > 1:
            return f"Unexpected '{tokens[1].value}' after {verb}."
        return None

    return "Unsupported query."
