import re
from typing import List, Optional

from sqlparse import lexer
from sqlparse import tokens as T

from sqompare.constants import ESCAPE_CHAR, QUOTE_CHARS

_WHITESPACE = " \t\r\n\f\v"


def normalize_sql(sql: str) -> str:
    """
    Strips comments and collapses whitespace so the splitters only ever see
    single-spaced, comment-free text.

    Args:
        sql (str): The raw SQL dump text.

    Returns:
        str: The normalized SQL string.
    """
    if not sql:
        return ""

    # A byte-order mark is not whitespace to the regexes downstream
    sql = sql.lstrip("\ufeff")

    # The lexer knows where string literals are, so "--" inside a quoted
    # default value survives. Grouping (sqlparse.format) is avoided because
    # it refuses statements with very many tokens, e.g. dump INSERTs.
    parts = []
    for ttype, value in lexer.tokenize(sql):
        if ttype in T.Comment:
            parts.append(' ')
        else:
            parts.append(value)

    return re.sub(r'\s+', ' ', "".join(parts)).strip()


class QuoteTracker:
    """
    Tracks whether a left-to-right scan is inside a quoted literal.

    The literal is keyed on its opening character and only the same
    character closes it, unless a backslash immediately precedes it.
    """

    def __init__(self):
        self.quote_char: Optional[str] = None
        self._prev_char = ''

    @property
    def in_quote(self) -> bool:
        return self.quote_char is not None

    def feed(self, char: str) -> bool:
        """Consumes one character and returns whether the scan is now quoted."""
        if self.quote_char is None:
            if char in QUOTE_CHARS:
                self.quote_char = char
        elif char == self.quote_char and self._prev_char != ESCAPE_CHAR:
            self.quote_char = None
        self._prev_char = char
        return self.in_quote


def split_top_level(text: str, delimiters: str, track_parens: bool = False) -> List[str]:
    """
    Splits text on delimiter characters that sit outside quoted literals
    and, when track_parens is set, outside any parentheses.

    Pieces are trimmed and empty pieces are dropped. Source order is kept.
    """
    pieces = []
    current = []
    tracker = QuoteTracker()
    depth = 0

    for char in text:
        quoted = tracker.feed(char)

        if not quoted and track_parens:
            if char == '(':
                depth += 1
            elif char == ')':
                depth -= 1

        if not quoted and depth == 0 and char in delimiters:
            piece = "".join(current).strip()
            if piece:
                pieces.append(piece)
            current = []
        else:
            current.append(char)

    piece = "".join(current).strip()
    if piece:
        pieces.append(piece)

    return pieces


def split_statements(sql: str) -> List[str]:
    """Splits normalized SQL into statements on unquoted semicolons."""
    return split_top_level(sql, ';')


def split_definitions(columns_section: str) -> List[str]:
    """Splits a CREATE TABLE body into column and constraint fragments."""
    return split_top_level(columns_section, ',', track_parens=True)


def tokenize_definition(fragment: str) -> List[str]:
    """
    Splits one column fragment into words. Quoted literals and
    parenthesized groups stay whole, e.g. ``DEFAULT 'a b'`` gives two tokens.
    """
    return split_top_level(fragment, _WHITESPACE, track_parens=True)


def last_unquoted_index(text: str, target: str, start: int = 0) -> int:
    """Position of the last ``target`` character outside quotes, or -1."""
    tracker = QuoteTracker()
    found = -1
    for i, char in enumerate(text):
        quoted = tracker.feed(char)
        if i >= start and not quoted and char == target:
            found = i
    return found
