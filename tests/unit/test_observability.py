"""
Unit tests for logging and tracing helpers.
"""

import json
import logging
from datetime import datetime, timezone

import pytest
import structlog
from opentelemetry.sdk.trace import TracerProvider

from turn_dispatch import __version__
from turn_dispatch.config import get_settings
from turn_dispatch.constants import TicketClass
from turn_dispatch.observability.logging import (
    REDACTED,
    add_trace_context,
    redact_secrets,
    service_info_processor,
    setup_logging,
)
from turn_dispatch.observability.tracing import set_ticket_attributes
from turn_dispatch.types.ticket import Ticket


@pytest.fixture
def vip_ticket() -> Ticket:
    return Ticket(
        id=1714555800000,
        name="Ana",
        age=70,
        type=TicketClass.VIP,
        created_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def tracer():
    return TracerProvider().get_tracer("test")


@pytest.fixture
def json_logging(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch):
    """Route stdlib logging through the structlog pipeline for one test."""
    monkeypatch.setenv("LOG_FORMAT", "json")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("OTEL_SERVICE_NAME", "turn-dispatch")
    get_settings.cache_clear()
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level

    setup_logging()
    yield capsys

    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    get_settings.cache_clear()


class TestLogProcessors:
    """Tests for the structlog processors."""

    def test_vip_code_is_redacted(self):
        """Test that credentials are masked and other fields kept."""
        event = redact_secrets(
            None,
            "info",
            {"event": "Ticket request rejected", "vip_code": "s3cret", "reason": "invalid_age"},
        )

        assert event["vip_code"] == REDACTED
        assert event["reason"] == "invalid_age"

    def test_header_name_is_redacted(self):
        """Test that a logged header mapping entry is masked too."""
        event = redact_secrets(None, "info", {"event": "x", "x-vip-code": "s3cret"})

        assert event["x-vip-code"] == REDACTED

    def test_absent_code_left_alone(self):
        """Test that a missing credential stays visible as missing."""
        event = redact_secrets(None, "info", {"event": "x", "vip_code": None})

        assert event["vip_code"] is None

    def test_service_info(self):
        """Test that records carry the service identity without overriding fields."""
        add_service_info = service_info_processor("turn-dispatch")

        event = add_service_info(None, "info", {"event": "x"})
        assert event["service"] == "turn-dispatch"
        assert event["version"] == __version__

        event = add_service_info(None, "info", {"event": "x", "service": "other"})
        assert event["service"] == "other"

    def test_trace_context_outside_span(self):
        """Test that no ids are added when nothing is being traced."""
        assert "trace_id" not in add_trace_context(None, "info", {"event": "x"})

    def test_trace_context_inside_span(self, tracer):
        """Test that the active span ids are added."""
        with tracer.start_as_current_span("submit_ticket"):
            event = add_trace_context(None, "info", {"event": "x"})

        assert len(event["trace_id"]) == 32
        assert len(event["span_id"]) == 16


class TestSetupLogging:
    """Tests for the configured logging pipeline."""

    def test_stdlib_extra_is_structured_and_redacted(self, json_logging):
        """Test that a stdlib record comes out as JSON with secrets masked."""
        logging.getLogger("turn_dispatch.test").warning(
            "VIP code rejected",
            extra={"vip_code": "s3cret", "ticket_class": "vip"},
        )

        line = json_logging.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "VIP code rejected"
        assert record["ticket_class"] == "vip"
        assert record["vip_code"] == REDACTED
        assert record["service"] == "turn-dispatch"
        assert "s3cret" not in line


class TestTicketSpans:
    """Tests for ticket span attributes."""

    def test_ticket_attributes(self, tracer, vip_ticket: Ticket):
        """Test that a span carries the ticket id and class plus extras."""
        with tracer.start_as_current_span("dispatch_ticket") as span:
            set_ticket_attributes(span, vip_ticket, remaining=3)

        assert dict(span.attributes) == {
            "ticket.id": vip_ticket.id,
            "ticket.class": "vip",
            "ticket.remaining": 3,
        }
