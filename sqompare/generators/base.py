from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from sqompare.models import Column, Table


class BaseGenerator(ABC):
    @abstractmethod
    def create_table_sql(self, table: Table, include_collation: bool = True) -> str:
        """Renders a CREATE TABLE statement for a whole table."""
        pass

    @abstractmethod
    def add_columns_sql(self, table_name: str, columns: Sequence[Tuple[Column, Optional[Table]]],
                        anchor: Optional[Table] = None, include_collation: bool = True) -> str:
        """Renders one ALTER TABLE statement adding every given column."""
        pass

    @abstractmethod
    def modify_columns_sql(self, table_name: str, columns: Sequence[Column],
                           source_table: Optional[Table] = None, include_collation: bool = True) -> str:
        """Renders one ALTER TABLE statement rewriting every given column."""
        pass

    def quote_ident(self, ident: str) -> str:
        """Quotes an identifier if needed. Default implementation returns as is."""
        return ident
