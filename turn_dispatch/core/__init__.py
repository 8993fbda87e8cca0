"""
Core queue logic: admission, dispatch and read-only queries.
"""

from turn_dispatch.core.dispatcher import Dispatcher
from turn_dispatch.core.query import QueryService
from turn_dispatch.core.service import TurnService
from turn_dispatch.core.validator import validate_ticket_request

__all__ = [
    "Dispatcher",
    "QueryService",
    "TurnService",
    "validate_ticket_request",
]
