"""Lexer for the simple_sql query language."""

import ply.lex as lex

from simple_sql.errors import ParseError


class QueryLexer:
    """Lexer for tokenizing query lines.

    Keywords are case-sensitive. Everything between the first ``(`` and the
    next ``)`` is lexed in the ``list`` state as comma-separated items, and
    anything after that ``)`` is ignored.
    """

    # Reserved keywords (exact spelling)
    reserved = {
        "CREATE": "CREATE",
        "TABLE": "TABLE",
        "INSERT": "INSERT",
        "INTO": "INTO",
        "SELECT": "SELECT",
        "FROM": "FROM",
        "SAVE": "SAVE",
        "LOAD": "LOAD",
        "EXIT": "EXIT",
    }

    # Token list
    tokens = [
        "NAME",
        "STAR",
        "LPAREN",
        "RPAREN",
        "COMMA",
        "ITEM",
    ] + list(reserved.values())

    # Lexer states: list state for the body of a parenthesized list
    states = (("list", "exclusive"),)

    t_COMMA = r","
    t_ignore = " \t"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_LPAREN(self, t: lex.LexToken) -> lex.LexToken:
        r"\("
        t.lexer.begin("list")
        return t

    def t_RPAREN(self, t: lex.LexToken) -> lex.LexToken:
        r"\)"
        return t

    def t_NAME(self, t: lex.LexToken) -> lex.LexToken:
        r"[^\s(),]+"
        if t.value == "*":
            t.type = "STAR"
        else:
            t.type = self.reserved.get(t.value, "NAME")
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise ParseError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    # --- Exclusive list state tokens ---

    t_list_ignore = ""
    t_list_COMMA = r","

    def t_list_ITEM(self, t: lex.LexToken) -> lex.LexToken:
        r"[^,)]+"
        t.value = t.value.strip()
        return t

    def t_list_RPAREN(self, t: lex.LexToken) -> lex.LexToken:
        r"\)"
        t.lexer.begin("INITIAL")
        # Text after the closing parenthesis is not part of the query
        t.lexer.lexpos = len(t.lexer.lexdata)
        return t

    def t_list_error(self, t: lex.LexToken) -> None:
        t.lexer.begin("INITIAL")
        raise ParseError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    # --- Lexer methods ---

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize, starting from the initial state."""
        self.lexer.begin("INITIAL")
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens


# Token types accepted where a table name is expected
NAME_TOKENS: frozenset[str] = frozenset(["NAME", *QueryLexer.reserved.values()])
