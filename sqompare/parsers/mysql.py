import re
from typing import Dict, List, Optional, Tuple

from sqompare.constants import (
    CONSTRAINT_PREFIXES,
    DEFAULT_TERMINATORS,
    FALLBACK_DATA_TYPE,
    TYPE_MODIFIERS,
    SQLKeyword,
)
from sqompare.logging_config import get_logger
from sqompare.models import Column, Schema, Table
from sqompare.parsers.base import BaseParser
from sqompare.parsers.utils import (
    last_unquoted_index,
    normalize_sql,
    split_definitions,
    split_statements,
    tokenize_definition,
)

logger = get_logger("parser")

CREATE_TABLE_RE = re.compile(r'^\s*CREATE\s+TABLE\b', re.IGNORECASE)
TABLE_NAME_RE = re.compile(
    r'^\s*CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?(?:`([^`]+)`|"([^"]+)"|(\w+))',
    re.IGNORECASE
)
IDENTIFIER_RE = re.compile(r'^(?:`([^`]+)`|"([^"]+)"|(\w+))')
LEADING_WORDS_RE = re.compile(r'^(\w+)(?:\s+(\w+))?')

TYPE_TOKEN_RE = re.compile(r'^([A-Za-z_]\w*)\s*(\(.*\))?$', re.DOTALL)
BARE_TYPE_RE = re.compile(r'^([A-Za-z_]\w*)')

ENGINE_RE = re.compile(r'\bENGINE\s*=\s*([^\s,;]+)', re.IGNORECASE)
TABLE_CHARSET_RE = re.compile(r'(?:\bDEFAULT\s+)?(?:\bCHARACTER\s+SET|\bCHARSET)\s*=\s*([^\s,;]+)', re.IGNORECASE)
TABLE_COLLATE_RE = re.compile(r'(?:\bDEFAULT\s+)?\bCOLLATE\s*=\s*([^\s,;]+)', re.IGNORECASE)


def _first_group(match) -> Optional[str]:
    for group in match.groups():
        if group:
            return group
    return None


class MySQLParser(BaseParser):
    """
    Best-effort parser for the CREATE TABLE statements of a MySQL dump.

    Anything that is not a recognisable CREATE TABLE statement, and any
    fragment without a column name, is skipped rather than reported.
    Each call builds a fresh Schema; the parser holds no state.
    """

    def parse(self, sql_content: str, source: str) -> Schema:
        tables: Dict[str, Table] = {}

        for statement in split_statements(normalize_sql(sql_content)):
            if not self.is_create_table(statement):
                continue
            table = self.parse_create_table(statement, source)
            if table is not None:
                # Last definition of a duplicated name wins
                tables[table.name] = table

        logger.debug(f"Parsed {len(tables)} tables", extra={'source': source, 'operation': 'parse'})
        return Schema(source=source, tables=tables)

    def is_create_table(self, statement: str) -> bool:
        return bool(CREATE_TABLE_RE.match(statement))

    def parse_create_table(self, statement: str, source: str = "") -> Optional[Table]:
        extracted = self.extract_table_definition(statement)
        if extracted is None:
            logger.debug(f"Skipped unparseable statement: {statement[:80]}", extra={'source': source, 'operation': 'parse'})
            return None

        table_name, columns_section, options_section = extracted
        columns = []
        for fragment in split_definitions(columns_section):
            column = self.parse_column_definition(fragment)
            if column is not None:
                columns.append(column)

        options = self.parse_table_options(options_section)
        return Table(
            name=table_name,
            columns=tuple(columns),
            source=source,
            engine=options['engine'],
            charset=options['charset'],
            collation=options['collation']
        )

    def extract_table_definition(self, statement: str) -> Optional[Tuple[str, str, str]]:
        """
        Returns (table name, column list text, table option text).

        The column list runs from the first "(" after the name to the last
        unquoted ")" of the statement; nested parentheses are left for the
        column splitter.
        """
        match = TABLE_NAME_RE.match(statement)
        if not match:
            return None
        table_name = _first_group(match)

        open_idx = statement.find('(', match.end())
        if open_idx == -1:
            return None
        close_idx = last_unquoted_index(statement, ')', start=open_idx + 1)
        if close_idx == -1:
            return None

        columns_section = statement[open_idx + 1:close_idx].strip()
        if not columns_section:
            return None

        return table_name, columns_section, statement[close_idx + 1:].strip()

    def is_constraint_or_key(self, fragment: str) -> bool:
        match = LEADING_WORDS_RE.match(fragment)
        if not match:
            return False
        leading = tuple(word.upper() for word in match.groups() if word)
        return any(leading[:len(prefix)] == prefix for prefix in CONSTRAINT_PREFIXES)

    def parse_column_definition(self, fragment: str) -> Optional[Column]:
        fragment = fragment.strip()
        if self.is_constraint_or_key(fragment):
            return None

        match = IDENTIFIER_RE.match(fragment)
        if not match:
            return None
        name = _first_group(match)
        if not name:
            return None

        tokens = tokenize_definition(fragment[match.end():])
        words = [t.upper() for t in tokens]

        return Column(
            name=name,
            data_type=self._extract_data_type(tokens),
            is_nullable=not self._has_sequence(words, SQLKeyword.NOT, SQLKeyword.NULL),
            default_value=self._extract_default(tokens, words),
            auto_increment=SQLKeyword.AUTO_INCREMENT in words,
            charset=self._extract_charset(tokens, words),
            collation=self._value_after(tokens, words, SQLKeyword.COLLATE),
            raw_definition=fragment
        )

    def parse_table_options(self, options_section: str) -> Dict[str, Optional[str]]:
        options = {'engine': None, 'charset': None, 'collation': None}
        if not options_section:
            return options

        engine_match = ENGINE_RE.search(options_section)
        if engine_match:
            options['engine'] = engine_match.group(1)

        charset_match = TABLE_CHARSET_RE.search(options_section)
        if charset_match:
            options['charset'] = charset_match.group(1)

        collate_match = TABLE_COLLATE_RE.search(options_section)
        if collate_match:
            options['collation'] = collate_match.group(1)

        return options

    def _extract_data_type(self, tokens: List[str]) -> str:
        if not tokens:
            return FALLBACK_DATA_TYPE

        match = TYPE_TOKEN_RE.match(tokens[0])
        if not match:
            bare = BARE_TYPE_RE.match(tokens[0])
            return bare.group(1).upper() if bare else FALLBACK_DATA_TYPE

        data_type = match.group(1)
        args = match.group(2)
        idx = 1
        # VARCHAR (50) tokenizes as two words
        if args is None and len(tokens) > 1 and tokens[1].startswith('(') and tokens[1].endswith(')'):
            args = tokens[1]
            idx = 2

        parts = [data_type + (args or '')]
        while idx < len(tokens) and tokens[idx].upper() in TYPE_MODIFIERS:
            parts.append(tokens[idx])
            idx += 1

        return " ".join(parts).upper()

    def _extract_default(self, tokens: List[str], words: List[str]) -> Optional[str]:
        if SQLKeyword.DEFAULT not in words:
            return None

        start = words.index(SQLKeyword.DEFAULT) + 1
        value = []
        for token, word in zip(tokens[start:], words[start:]):
            # DEFAULT NULL is a value, a later NULL is a nullability clause
            if word in DEFAULT_TERMINATORS and not (word == SQLKeyword.NULL and not value):
                break
            value.append(token)

        return " ".join(value) if value else None

    def _extract_charset(self, tokens: List[str], words: List[str]) -> Optional[str]:
        for i, word in enumerate(words):
            if word == SQLKeyword.CHARACTER and i + 2 < len(words) and words[i + 1] == SQLKeyword.SET:
                return tokens[i + 2]
            if word == SQLKeyword.CHARSET and i + 1 < len(words):
                return tokens[i + 1]
        return None

    def _value_after(self, tokens: List[str], words: List[str], keyword: str) -> Optional[str]:
        for i, word in enumerate(words[:-1]):
            if word == keyword:
                return tokens[i + 1]
        return None

    def _has_sequence(self, words: List[str], first: str, second: str) -> bool:
        return any(a == first and b == second for a, b in zip(words, words[1:]))


def parse(sql_text: str, source_label: str) -> Schema:
    """Parses every CREATE TABLE statement in a dump into a Schema."""
    return MySQLParser().parse(sql_text, source_label)
