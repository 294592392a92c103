from sqompare.comparator import Comparator, ComparisonResult, compare
from sqompare.models import Column, Schema, Table
from sqompare.parsers.mysql import MySQLParser, parse

__all__ = [
    "Column",
    "Comparator",
    "ComparisonResult",
    "MySQLParser",
    "Schema",
    "Table",
    "compare",
    "parse",
]
