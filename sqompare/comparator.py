from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sqompare.generators.base import BaseGenerator
from sqompare.generators.mysql import MySQLGenerator
from sqompare.logging_config import get_logger
from sqompare.models import Column, Schema, Table

logger = get_logger("comparator")


@dataclass(frozen=True)
class MissingTable:
    table_name: str
    present_in: str
    missing_from: str
    column_count: int
    table: Table

    def to_dict(self):
        return {
            "table_name": self.table_name,
            "present_in": self.present_in,
            "missing_from": self.missing_from,
            "column_count": self.column_count,
            "table": self.table.to_dict()
        }


@dataclass(frozen=True)
class MissingColumn:
    table_name: str
    column_name: str
    data_type: str
    missing_from: str
    is_nullable: bool
    column: Column

    def to_dict(self):
        return {
            "table_name": self.table_name,
            "column_name": self.column_name,
            "data_type": self.data_type,
            "missing_from": self.missing_from,
            "is_nullable": self.is_nullable,
            "column": self.column.to_dict()
        }


@dataclass(frozen=True)
class ColumnDifference:
    table_name: str
    column_name: str
    source_column: Column
    target_column: Column
    differences: Tuple[str, ...] = ()

    def to_dict(self):
        return {
            "table_name": self.table_name,
            "column_name": self.column_name,
            "source_column": self.source_column.to_dict(),
            "target_column": self.target_column.to_dict(),
            "differences": list(self.differences)
        }


@dataclass(frozen=True)
class ComparisonResult:
    missing_tables: Tuple[MissingTable, ...] = ()
    missing_columns: Tuple[MissingColumn, ...] = ()
    different_columns: Tuple[ColumnDifference, ...] = ()
    matching_tables: Tuple[str, ...] = ()
    create_table_queries: Tuple[str, ...] = ()
    alter_queries: Tuple[str, ...] = ()
    modify_queries: Tuple[str, ...] = ()
    source_label: str = ""
    target_label: str = ""
    include_collation: bool = True

    @property
    def has_differences(self) -> bool:
        return bool(self.missing_tables or self.missing_columns or self.different_columns)

    @property
    def all_queries(self) -> List[str]:
        return [*self.create_table_queries, *self.alter_queries, *self.modify_queries]

    def to_dict(self):
        return {
            "source_label": self.source_label,
            "target_label": self.target_label,
            "include_collation": self.include_collation,
            "missing_tables": [t.to_dict() for t in self.missing_tables],
            "missing_columns": [c.to_dict() for c in self.missing_columns],
            "different_columns": [d.to_dict() for d in self.different_columns],
            "matching_tables": list(self.matching_tables),
            "create_table_queries": list(self.create_table_queries),
            "alter_queries": list(self.alter_queries),
            "modify_queries": list(self.modify_queries)
        }


@dataclass
class _PendingAdd:
    # Columns are paired with the table that declares them, which supplies
    # the collation inherited by text columns
    anchor: Table
    columns: List[Tuple[Column, Table]] = field(default_factory=list)


@dataclass
class _PendingModify:
    source_table: Table
    columns: List[Column] = field(default_factory=list)


class Comparator:
    """
    Two-way structural diff of two schemas.

    schema1 is the source of truth for attribute differences: those are
    reported once, from the schema1 -> schema2 pass, and the MODIFY
    statements rewrite columns to schema1's definition.
    """

    def __init__(self, include_collation: bool = True, generator: Optional[BaseGenerator] = None):
        self.include_collation = include_collation
        self.generator = generator or MySQLGenerator()

    def compare(self, schema1: Schema, schema2: Schema) -> ComparisonResult:
        missing_tables: List[MissingTable] = []
        missing_columns: List[MissingColumn] = []
        different_columns: List[ColumnDifference] = []
        matching_tables: List[str] = []
        create_table_queries: List[str] = []

        # Keyed by the schema1 table name, in discovery order
        pending_adds: Dict[str, _PendingAdd] = {}
        pending_modifies: Dict[str, _PendingModify] = {}

        label1, label2 = schema1.source, schema2.source

        for table1 in schema1.tables.values():
            table2 = schema2.find_table(table1.name)
            if table2 is None:
                missing_tables.append(self._missing_table(table1, label1, label2))
                create_table_queries.append(self.generator.create_table_sql(table1, self.include_collation))
                continue

            matching_tables.append(table1.name)

            for col1 in table1.columns:
                col2 = table2.find_column(col1.name)
                if col2 is None:
                    missing_columns.append(self._missing_column(table1.name, col1, label2))
                    pending = pending_adds.setdefault(table1.name, _PendingAdd(anchor=table2))
                    pending.columns.append((col1, table1))
                    continue

                differences = col1.differences(col2)
                if differences:
                    different_columns.append(ColumnDifference(
                        table_name=table1.name,
                        column_name=col1.name,
                        source_column=col1,
                        target_column=col2,
                        differences=tuple(differences)
                    ))
                    pending = pending_modifies.setdefault(table1.name, _PendingModify(source_table=table1))
                    pending.columns.append(col1)

        for table2 in schema2.tables.values():
            table1 = schema1.find_table(table2.name)
            if table1 is None:
                missing_tables.append(self._missing_table(table2, label2, label1))
                create_table_queries.append(self.generator.create_table_sql(table2, self.include_collation))
                continue

            for col2 in table2.columns:
                if table1.find_column(col2.name) is None:
                    missing_columns.append(self._missing_column(table2.name, col2, label1))
                    pending = pending_adds.setdefault(table1.name, _PendingAdd(anchor=table1))
                    pending.columns.append((col2, table2))

        alter_queries = [
            self.generator.add_columns_sql(table_name, pending.columns, pending.anchor, self.include_collation)
            for table_name, pending in pending_adds.items()
        ]
        modify_queries = [
            self.generator.modify_columns_sql(table_name, pending.columns, pending.source_table, self.include_collation)
            for table_name, pending in pending_modifies.items()
        ]

        logger.info(
            f"Compared {len(schema1)} vs {len(schema2)} tables: "
            f"{len(missing_tables)} missing tables, {len(missing_columns)} missing columns, "
            f"{len(different_columns)} different columns",
            extra={'operation': 'compare'}
        )

        return ComparisonResult(
            missing_tables=tuple(missing_tables),
            missing_columns=tuple(missing_columns),
            different_columns=tuple(different_columns),
            matching_tables=tuple(matching_tables),
            create_table_queries=tuple(create_table_queries),
            alter_queries=tuple(alter_queries),
            modify_queries=tuple(modify_queries),
            source_label=label1,
            target_label=label2,
            include_collation=self.include_collation
        )

    def _missing_table(self, table: Table, present_in: str, missing_from: str) -> MissingTable:
        return MissingTable(
            table_name=table.name,
            present_in=present_in,
            missing_from=missing_from,
            column_count=len(table.columns),
            table=table
        )

    def _missing_column(self, table_name: str, column: Column, missing_from: str) -> MissingColumn:
        return MissingColumn(
            table_name=table_name,
            column_name=column.name,
            data_type=column.data_type,
            missing_from=missing_from,
            is_nullable=column.is_nullable,
            column=column
        )


def compare(schema_a: Schema, schema_b: Schema, include_collation: bool = True) -> ComparisonResult:
    """Diffs two parsed schemas and renders the reconciling statements."""
    return Comparator(include_collation=include_collation).compare(schema_a, schema_b)
