"""
API request and response type definitions.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from turn_dispatch.constants import TicketClass
from turn_dispatch.types.ticket import QueueCounts, Ticket


class SubmitTicketRequest(BaseModel):
    """
    Request body for registering a ticket.

    Used for the OpenAPI schema only. Fields are deliberately loose so the
    admission validator, not the framework, decides which rule a bad
    request breaks.
    """

    name: Any = Field(default=None, description="Name of the person being served")
    age: Any = Field(default=None, description="Age, between 1 and 120")
    type: Any = Field(default=None, description="Ticket class: vip, priority or general")


class SubmitTicketResponse(BaseModel):
    """Response body after registering a ticket."""

    message: str = "Ticket registered successfully"
    ticket: Ticket
    position_in_class: int


class DispatchResponse(BaseModel):
    """
    Response body for a dispatch.

    `ticket` is null when nothing is waiting.
    """

    message: str
    ticket_class: TicketClass | None = None
    ticket: Ticket | None = None
    remaining: QueueCounts | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    store: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: str | None = None
    request_id: str | None = None
