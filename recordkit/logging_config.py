"""
Structured logging configuration for recordkit.

Provides JSON-formatted logs with trace_id support so every line emitted for
a record carries its id.

Environment Variables:
    RECORDKIT_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    RECORDKIT_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from recordkit.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="-3")
    logger.info("Merged record version")
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Handler:
    """
    Configure root logger with structured logging.

    Arguments override the environment:
    - RECORDKIT_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - RECORDKIT_LOG_FORMAT: json, text (default: json)

    Returns:
        The installed handler
    """
    log_level = (level or os.getenv("RECORDKIT_LOG_LEVEL", "INFO")).upper()
    fmt = (log_format or os.getenv("RECORDKIT_LOG_FORMAT", "json")).lower()
    resolved = LEVELS.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    # Handler-level so records propagated from child loggers are covered too
    handler.addFilter(TraceIDFilter())

    if fmt == "json":
        formatter: logging.Formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    return handler


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically the record id)

    Returns:
        LoggerAdapter with trace_id in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})
