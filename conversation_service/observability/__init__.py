"""
Observability module.

Provides logging configuration, structured log helpers, correlation ID
tracking and HTTP middleware.
"""

from conversation_service.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from conversation_service.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
