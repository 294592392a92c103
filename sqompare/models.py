from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple


def _yes_no(flag: bool) -> str:
    return 'YES' if flag else 'NO'


@dataclass(frozen=True)
class Column:
    name: str
    data_type: str = "TEXT"
    is_nullable: bool = True
    default_value: Optional[str] = None
    auto_increment: bool = False
    charset: Optional[str] = None
    collation: Optional[str] = None
    raw_definition: str = field(default="", compare=False)  # Diagnostics only

    def __repr__(self):
        return f"Column(name='{self.name}', type='{self.data_type}')"

    @property
    def base_type(self) -> str:
        return self.data_type.split('(')[0].strip().upper()

    def differences(self, other: "Column") -> List[str]:
        """
        Lists attribute differences against another column.

        The name is the join key and raw_definition is diagnostic text,
        so neither takes part in the comparison.
        """
        changes = []
        if self.data_type != other.data_type:
            changes.append(f"Data type: {self.data_type} vs {other.data_type}")
        if self.is_nullable != other.is_nullable:
            changes.append(f"Nullable: {_yes_no(self.is_nullable)} vs {_yes_no(other.is_nullable)}")
        if self.default_value != other.default_value:
            changes.append(f"Default: {self.default_value or 'NULL'} vs {other.default_value or 'NULL'}")
        if self.auto_increment != other.auto_increment:
            changes.append(f"Auto increment: {_yes_no(self.auto_increment)} vs {_yes_no(other.auto_increment)}")
        if self.charset != other.charset:
            changes.append(f"Charset: {self.charset or 'default'} vs {other.charset or 'default'}")
        if self.collation != other.collation:
            changes.append(f"Collation: {self.collation or 'default'} vs {other.collation or 'default'}")
        return changes

    def is_different(self, other: "Column") -> bool:
        return bool(self.differences(other))

    def to_dict(self):
        return {
            "name": self.name,
            "data_type": self.data_type,
            "is_nullable": self.is_nullable,
            "default_value": self.default_value,
            "auto_increment": self.auto_increment,
            "charset": self.charset,
            "collation": self.collation,
            "raw_definition": self.raw_definition
        }


@dataclass(frozen=True)
class Table:
    name: str
    columns: Tuple[Column, ...] = ()
    source: str = ""
    engine: Optional[str] = None
    charset: Optional[str] = None
    collation: Optional[str] = None

    def get_column(self, name: str) -> Optional[Column]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def find_column(self, name: str) -> Optional[Column]:
        """First column whose name matches case-insensitively."""
        wanted = name.lower()
        for col in self.columns:
            if col.name.lower() == wanted:
                return col
        return None

    @property
    def last_column(self) -> Optional[Column]:
        return self.columns[-1] if self.columns else None

    def to_dict(self):
        return {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
            "source": self.source,
            "engine": self.engine,
            "charset": self.charset,
            "collation": self.collation
        }


@dataclass(frozen=True)
class Schema:
    """Tables parsed from one input, keyed by their declared name."""
    source: str = ""
    tables: Dict[str, Table] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.tables)

    def __iter__(self) -> Iterator[str]:
        return iter(self.tables)

    def __contains__(self, name) -> bool:
        return name in self.tables

    def __getitem__(self, name: str) -> Table:
        return self.tables[name]

    def get_table(self, name: str) -> Optional[Table]:
        return self.tables.get(name)

    def find_table(self, name: str) -> Optional[Table]:
        """First table whose name matches case-insensitively, in insertion order."""
        wanted = name.lower()
        for table in self.tables.values():
            if table.name.lower() == wanted:
                return table
        return None

    def to_dict(self):
        return {
            "source": self.source,
            "tables": [t.to_dict() for t in self.tables.values()]
        }
