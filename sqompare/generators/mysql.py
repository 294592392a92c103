from typing import List, Optional, Sequence, Tuple

from sqompare.constants import TEXT_FAMILY_TYPES
from sqompare.generators.base import BaseGenerator
from sqompare.models import Column, Table


class MySQLGenerator(BaseGenerator):
    """
    Renders migration statements in MySQL syntax.

    Charset and collation clauses, at both column and table level, are
    only emitted when include_collation is set.
    """

    def quote_ident(self, ident: str) -> str:
        return "`" + ident.replace("`", "``") + "`"

    def create_table_sql(self, table: Table, include_collation: bool = True) -> str:
        stmt = f"CREATE TABLE {self.quote_ident(table.name)} (\n"
        cols = [f"  {self._col_def(c, include_collation=include_collation)}" for c in table.columns]
        stmt += ",\n".join(cols)
        stmt += "\n)"

        if table.engine:
            stmt += f" ENGINE={table.engine}"
        if table.charset:
            stmt += f" DEFAULT CHARSET={table.charset}"
        if include_collation and table.collation:
            stmt += f" COLLATE={table.collation}"

        stmt += ";"
        return stmt

    def add_columns_sql(self, table_name: str, columns: Sequence[Tuple[Column, Optional[Table]]],
                        anchor: Optional[Table] = None, include_collation: bool = True) -> str:
        """
        Each entry pairs the column with the table declaring it. The first
        column goes after the anchor table's last column and every later
        one after the column added before it.
        """
        if not columns:
            return ""

        previous = anchor.last_column.name if anchor is not None and anchor.last_column else None
        clauses = []
        for column, declared_in in columns:
            clause = "ADD COLUMN " + self._col_def(
                column,
                collation_table=declared_in,
                include_collation=include_collation,
                explicit_null=True
            )
            if previous:
                clause += f" AFTER {self.quote_ident(previous)}"
            clauses.append(clause)
            previous = column.name

        return self._alter_table(table_name, clauses)

    def modify_columns_sql(self, table_name: str, columns: Sequence[Column],
                           source_table: Optional[Table] = None, include_collation: bool = True) -> str:
        if not columns:
            return ""

        clauses = [
            "MODIFY COLUMN " + self._col_def(
                column,
                collation_table=source_table,
                include_collation=include_collation,
                explicit_null=True
            )
            for column in columns
        ]
        return self._alter_table(table_name, clauses)

    def _alter_table(self, table_name: str, clauses: List[str]) -> str:
        return f"ALTER TABLE {self.quote_ident(table_name)}\n  " + ",\n  ".join(clauses) + ";"

    def _col_def(self, col: Column, collation_table: Optional[Table] = None,
                 include_collation: bool = True, explicit_null: bool = False) -> str:
        base = f"{self.quote_ident(col.name)} {col.data_type}"

        if include_collation:
            if col.charset:
                base += f" CHARACTER SET {col.charset}"
            collation = col.collation
            # Text columns without their own collation take the table's
            if not collation and collation_table is not None and collation_table.collation \
                    and col.base_type in TEXT_FAMILY_TYPES:
                collation = collation_table.collation
            if collation:
                base += f" COLLATE {collation}"

        if not col.is_nullable:
            base += " NOT NULL"
        elif explicit_null:
            base += " NULL"
        if col.default_value is not None:
            base += f" DEFAULT {col.default_value}"
        if col.auto_increment:
            base += " AUTO_INCREMENT"
        return base
