"""
Test suite for structured logging helpers.

System role: Verification of log value sanitisation
"""

import logging
from datetime import datetime, timezone

import pytest

from conversation_service.boundary.db.models import SessionStatus
from conversation_service.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)


class TestSafeLogValue:
    """Test suite for safe_log_value."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "None"),
            (SessionStatus.ACTIVE, "active"),
            (datetime(2025, 1, 1, tzinfo=timezone.utc), "2025-01-01T00:00:00+00:00"),
            ([1, 2, 3], "list(3 items)"),
            ({"text": "secret"}, "dict(1 keys)"),
            (42, "42"),
        ],
    )
    def test_safe_log_value_should_summarise(self, value, expected: str) -> None:
        """Test values are flattened without leaking container contents."""
        assert safe_log_value(value) == expected

    def test_safe_log_value_should_truncate_long_strings(self) -> None:
        """Test long values are cut and annotated with their full length."""
        result = safe_log_value("x" * 300, max_length=10)

        assert result == "x" * 10 + "... (truncated, 300 total)"


class TestLogWithContext:
    """Test suite for log_with_context and log_exception_with_context."""

    def test_log_with_context_should_attach_extras(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test context values become record attributes."""
        logger = logging.getLogger("tests.log_utils")

        with caplog.at_level(logging.INFO, logger="tests.log_utils"):
            log_with_context(logger, logging.INFO, "Event appended", session_id="s1", payload={"a": 1})

        record = caplog.records[-1]
        assert record.getMessage() == "Event appended"
        assert record.session_id == "s1"
        assert record.payload == "dict(1 keys)"

    def test_log_exception_with_context_should_record_error(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test exceptions are logged at ERROR with type and traceback."""
        logger = logging.getLogger("tests.log_utils")
        error = RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="tests.log_utils"):
            log_exception_with_context(logger, "Failed", error, session_id="s1")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.error_type == "RuntimeError"
        assert record.error_msg == "boom"
        assert record.exc_info is not None
