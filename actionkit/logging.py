"""Logging utilities for the actionkit package.

Provides a simple logging interface that works with any framework, plus an
optional structured JSON setup for standalone processes (e.g. the MCP server).
Attribute values are never included in log output.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class ActionJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding standard fields to every record."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def setup_logging(
    level: str = "INFO",
    use_stderr: bool = False,
    json_format: bool = False,
) -> None:
    """Configure root logging for a standalone process.

    This is a fallback; the web framework should configure logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_stderr: Log to stderr instead of stdout (required for stdio MCP servers)
        json_format: Emit structured JSON records instead of plain text
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    stream = sys.stderr if use_stderr else sys.stdout
    handler = logging.StreamHandler(stream)
    if json_format:
        handler.setFormatter(ActionJsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s"
        ))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(handler)

    # Quiet down noisy libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("mcp").setLevel(logging.WARNING)
