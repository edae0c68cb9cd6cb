"""
Logging utilities for structured logging.

Helpers that flatten arbitrary context values into short, log-safe strings
before passing them as ``extra=`` fields. Payloads and metadata are opaque
caller data, so they are summarised rather than logged verbatim.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import enum
import logging
from datetime import datetime
from typing import Any


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Convert a context value to a bounded string for logging.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    if value is None:
        return "None"
    if isinstance(value, enum.Enum):
        val_str = str(value.value)
    elif isinstance(value, datetime):
        val_str = value.isoformat()
    elif isinstance(value, (list, tuple)):
        val_str = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        val_str = f"dict({len(value)} keys)"
    else:
        val_str = str(value)

    if len(val_str) > max_length:
        return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
    return val_str


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value pairs attached as record attributes
    """
    safe_context = {key: safe_log_value(val) for key, val in context.items()}
    logger.log(level, message, extra=safe_context)


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log an exception with traceback and structured context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional key-value pairs
    """
    safe_context = {key: safe_log_value(val) for key, val in context.items()}
    safe_context.update({
        "error_type": type(exc).__name__,
        "error_msg": safe_log_value(str(exc)),
    })
    logger.error(message, exc_info=exc, extra=safe_context)
