from typing import List, Optional

import sqlalchemy
from sqlalchemy import inspect, text

from sqompare.exceptions import DialectError
from sqompare.logging_config import get_logger
from sqompare.models import Schema
from sqompare.parsers.mysql import parse

logger = get_logger("introspector")

SUPPORTED_DIALECTS = ("mysql", "mariadb", "sqlite")


def normalize_db_url(db_url: str) -> str:
    """Routes bare mysql:// URLs to the PyMySQL driver."""
    if db_url.startswith("mysql://"):
        return "mysql+pymysql://" + db_url[len("mysql://"):]
    return db_url


class DBIntrospector:
    """
    Dumps CREATE TABLE text from a live database so it can go through the
    same parser as a dump file.
    """

    def __init__(self, db_url: str):
        self.engine = sqlalchemy.create_engine(normalize_db_url(db_url))
        self.inspector = inspect(self.engine)

    def dump_ddl(self, table_names: Optional[List[str]] = None) -> str:
        dialect = self.engine.dialect.name
        if dialect not in SUPPORTED_DIALECTS:
            raise DialectError(f"Cannot dump DDL from a {dialect} database")

        if table_names is None:
            table_names = self.inspector.get_table_names()

        statements = []
        with self.engine.connect() as conn:
            for table_name in table_names:
                if dialect in ('mysql', 'mariadb'):
                    quoted = self.engine.dialect.identifier_preparer.quote_identifier(table_name)
                    row = conn.execute(text(f"SHOW CREATE TABLE {quoted}")).fetchone()
                    ddl = row[1] if row else None
                else:
                    ddl = conn.execute(
                        text("SELECT sql FROM sqlite_master WHERE type = 'table' AND name = :name"),
                        {"name": table_name}
                    ).scalar()

                if ddl:
                    statements.append(ddl)
                else:
                    logger.warning(f"No DDL returned for {table_name}", extra={'table_name': table_name, 'operation': 'introspect'})

        return ";\n\n".join(statements) + (";\n" if statements else "")

    def introspect(self, source: str, table_names: Optional[List[str]] = None) -> Schema:
        logger.info(f"Introspecting {self.engine.url.render_as_string(hide_password=True)}",
                    extra={'source': source, 'operation': 'introspect'})
        return parse(self.dump_ddl(table_names), source)
