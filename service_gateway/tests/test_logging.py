"""
Unit tests for the structlog processor chain.
"""

import structlog

from shared.logging import (
    add_correlation_context,
    add_timestamp,
    clear_context,
    set_request_id,
)


class TestLoggingProcessors:
    """Test cases for the shared log processors."""

    def test_epoch_time_does_not_replace_iso_timestamp(self):
        """Test the ISO timestamp survives the epoch-time processor."""
        event_dict = structlog.processors.TimeStamper(fmt="iso")(None, "info", {"event": "x"})

        result = add_timestamp(None, "info", event_dict)

        assert isinstance(result["timestamp"], str)
        assert "T" in result["timestamp"]
        assert isinstance(result["ts"], float)

    def test_correlation_context(self):
        """Test request id is copied into events."""
        set_request_id("req-1")
        try:
            result = add_correlation_context(None, "info", {"event": "x"})
        finally:
            clear_context()

        assert result["request_id"] == "req-1"

