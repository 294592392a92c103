"""
SQompare SQL Constants

Centralized definitions for SQL keywords and MySQL-specific constants
to reduce magic strings throughout the codebase.
"""

from enum import Enum
from typing import FrozenSet, Tuple


class SQLKeyword(str, Enum):
    """Column attribute keywords recognised by the parser."""

    NOT = "NOT"
    NULL = "NULL"
    DEFAULT = "DEFAULT"
    AUTO_INCREMENT = "AUTO_INCREMENT"
    CHARACTER = "CHARACTER"
    CHARSET = "CHARSET"
    SET = "SET"
    COLLATE = "COLLATE"


# Characters that open a quoted literal or identifier
QUOTE_CHARS: Tuple[str, ...] = ("'", '"', '`')

ESCAPE_CHAR = '\\'

# Leading tokens of fragments that declare keys or constraints, not columns.
# Two-word prefixes are listed as tuples and matched token by token.
CONSTRAINT_PREFIXES: Tuple[Tuple[str, ...], ...] = (
    ("PRIMARY", "KEY"),
    ("FOREIGN", "KEY"),
    ("UNIQUE",),
    ("KEY",),
    ("INDEX",),
    ("FULLTEXT",),
    ("SPATIAL",),
    ("CONSTRAINT",),
    ("CHECK",),
)

TYPE_MODIFIERS: FrozenSet[str] = frozenset({"UNSIGNED", "SIGNED", "ZEROFILL"})

# Column types that inherit the table collation when added or modified
TEXT_FAMILY_TYPES: FrozenSet[str] = frozenset({
    "VARCHAR", "CHAR", "TEXT", "TINYTEXT", "MEDIUMTEXT", "LONGTEXT",
})

# Keywords that end a DEFAULT clause
DEFAULT_TERMINATORS: FrozenSet[str] = frozenset({
    "NOT", "NULL", "AUTO_INCREMENT", "COMMENT", "COLLATE", "CHARACTER",
    "CHARSET", "PRIMARY", "UNIQUE", "KEY", "REFERENCES", "CHECK",
    "CONSTRAINT", "GENERATED", "VIRTUAL", "STORED", "INVISIBLE", "VISIBLE",
    "COLUMN_FORMAT", "STORAGE",
})

FALLBACK_DATA_TYPE = "TEXT"

DEFAULT_SOURCE_LABEL = "Database 1"
DEFAULT_TARGET_LABEL = "Database 2"
