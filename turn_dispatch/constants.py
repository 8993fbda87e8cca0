"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class TicketClass(StrEnum):
    """
    Ticket classes, which decide dispatch precedence.

    Admission rules:
    - GENERAL: anyone
    - PRIORITY: age strictly above PRIORITY_MIN_AGE
    - VIP: requires the shared VIP access code
    """

    VIP = "vip"
    PRIORITY = "priority"
    GENERAL = "general"


# Dispatch precedence, highest first. Every queue structure is built from this.
DISPATCH_ORDER: tuple[TicketClass, ...] = (
    TicketClass.VIP,
    TicketClass.PRIORITY,
    TicketClass.GENERAL,
)

# Admission bounds
MIN_AGE = 1
MAX_AGE = 120
PRIORITY_MIN_AGE = 60  # exclusive
DEFAULT_UPCOMING_LIMIT = 5

# API constants
API_V1_PREFIX = "/v1"
VIP_CODE_HEADER = "X-VIP-Code"
REQUEST_ID_HEADER = "X-Request-ID"

# Metrics names
METRIC_QUEUE_DEPTH = "ticket_queue_depth"
METRIC_TICKETS_SUBMITTED = "tickets_submitted_total"
METRIC_TICKETS_REJECTED = "tickets_rejected_total"
METRIC_TICKETS_DISPATCHED = "tickets_dispatched_total"
METRIC_SNAPSHOT_FAILURES = "snapshot_write_failures_total"
METRIC_API_REQUESTS = "api_requests_total"
METRIC_API_LATENCY = "api_request_latency_seconds"

# Trace span names
SPAN_SUBMIT_TICKET = "submit_ticket"
SPAN_DISPATCH_TICKET = "dispatch_ticket"
SPAN_SAVE_SNAPSHOT = "save_snapshot"
