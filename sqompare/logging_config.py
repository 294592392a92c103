"""
SQompare Logging Configuration

Every module logs through a child of the ``sqompare`` logger. Records may
carry the context fields below through ``extra=``; both formatters render
them, as labelled suffixes on the console and as keys in JSON lines.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Dict, Optional

LOGGER_NAME = "sqompare"

# extra= field -> label used in console output
CONTEXT_FIELDS = {
    "table_name": "table",
    "operation": "op",
    "source": "source",
    "file_path": "file",
}

# Indexed by the -v count, capped at the last entry
VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def record_context(record: logging.LogRecord) -> Dict[str, object]:
    """Context fields present on a record, in CONTEXT_FIELDS order."""
    return {
        field_name: getattr(record, field_name)
        for field_name in CONTEXT_FIELDS
        if hasattr(record, field_name)
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for CI logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


class ColoredFormatter(logging.Formatter):
    """``[LEVEL] message [table=..., op=...]`` with an ANSI colored level tag."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        tag = f"[{level}]"
        if self.use_color and level in self.COLORS:
            tag = f"{self.COLORS[level]}{tag}{self.RESET}"

        context = record_context(record)
        suffix = ""
        if context:
            pairs = ", ".join(f"{CONTEXT_FIELDS[k]}={v}" for k, v in context.items())
            suffix = f" [{pairs}]"

        return f"{tag} {record.getMessage()}{suffix}"


def setup_logging(
    verbose: int = 0,
    log_format: str = "text",
    no_color: bool = False
) -> logging.Logger:
    """
    Configure and return the SQompare logger.

    Calling it again replaces the previous handler.

    Args:
        verbose: -v count (0=WARNING, 1=INFO, 2+=DEBUG)
        log_format: "text" or "json"
        no_color: Disable ANSI colors in text output; colors are also off
            when stderr is not a terminal

    Returns:
        The configured ``sqompare`` logger
    """
    level = VERBOSITY_LEVELS[min(max(verbose, 0), len(VERBOSITY_LEVELS) - 1)]

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ColoredFormatter(use_color=not no_color and sys.stderr.isatty()))

    logger.addHandler(handler)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """``sqompare.<name>``, or the package logger itself when name is empty."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)
