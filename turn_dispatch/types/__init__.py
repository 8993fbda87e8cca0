"""
Type definitions for the turn dispatch service.
Contains input/output type definitions for all functions, grouped by module.
"""

from turn_dispatch.types.api import (
    DispatchResponse,
    ErrorResponse,
    HealthResponse,
    SubmitTicketRequest,
    SubmitTicketResponse,
)
from turn_dispatch.types.ticket import (
    DispatchResult,
    EnqueueResult,
    QueueCounts,
    QueueSnapshot,
    QueueStatus,
    Ticket,
    TicketInput,
    UpcomingPreview,
)

__all__ = [
    # API types
    "SubmitTicketRequest",
    "SubmitTicketResponse",
    "DispatchResponse",
    "HealthResponse",
    "ErrorResponse",
    # Queue types
    "Ticket",
    "TicketInput",
    "EnqueueResult",
    "DispatchResult",
    "QueueCounts",
    "UpcomingPreview",
    "QueueStatus",
    "QueueSnapshot",
]
