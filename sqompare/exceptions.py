"""
SQompare Custom Exceptions

This module defines the exception classes raised around the comparison core.
Parsing, comparison and statement generation never raise for malformed SQL;
these errors come from reading inputs and talking to live databases.
"""


class SqompareError(Exception):
    """Base exception for all SQompare errors."""
    pass


class SourceError(SqompareError):
    """
    Raised when an input source cannot be turned into SQL text.

    Attributes:
        path: The file or directory that failed to load
        reason: Description of why loading failed
    """
    def __init__(self, path: str, reason: str = "Failed to read source"):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class DialectError(SqompareError):
    """Raised when a live database uses a backend we cannot dump DDL from."""
    pass
