from abc import ABC, abstractmethod

from sqompare.models import Schema


class BaseParser(ABC):
    @abstractmethod
    def parse(self, sql_content: str, source: str) -> Schema:
        """Parses SQL content and returns a Schema labelled with source."""
        pass
