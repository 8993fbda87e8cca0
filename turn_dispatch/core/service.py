"""
Turn dispatch service facade.

The only component the transport layer talks to. Composes the validator,
store, dispatcher and query service, and adds logging, metrics and spans
around them.
"""

import logging
from typing import Any

from turn_dispatch.constants import (
    DEFAULT_UPCOMING_LIMIT,
    SPAN_DISPATCH_TICKET,
    SPAN_SUBMIT_TICKET,
)
from turn_dispatch.core.dispatcher import Dispatcher
from turn_dispatch.core.query import QueryService
from turn_dispatch.core.validator import validate_ticket_request
from turn_dispatch.errors import PersistenceFailure, TicketNotFound, ValidationError
from turn_dispatch.observability.metrics import get_metrics
from turn_dispatch.observability.tracing import get_tracer, set_ticket_attributes
from turn_dispatch.store.repository import TicketStore
from turn_dispatch.types.ticket import (
    DispatchResult,
    EnqueueResult,
    QueueStatus,
    Ticket,
)

logger = logging.getLogger(__name__)


class TurnService:
    """
    Entry point for every queue operation.

    Features:
    - Admission: validation, then durable enqueue
    - Dispatch in class precedence order
    - Queue status and ticket lookup
    """

    def __init__(
        self,
        store: TicketStore,
        vip_access_code: str,
        upcoming_limit: int = DEFAULT_UPCOMING_LIMIT,
    ):
        """
        Initialize the service.

        Args:
            store: The ticket store to operate on.
            vip_access_code: Shared secret required for VIP admission.
            upcoming_limit: Default preview length for queue_status().
        """
        self._store = store
        self._vip_access_code = vip_access_code
        self._upcoming_limit = upcoming_limit
        self._dispatcher = Dispatcher(store)
        self._query = QueryService(store)
        self._metrics = get_metrics()
        self._metrics.update_queue_depths(store.depths())

    async def submit_ticket(
        self,
        request: Any,
        vip_code: str | None = None,
    ) -> EnqueueResult:
        """
        Validate and admit a ticket.

        Args:
            request: Raw request body (`name`, `age`, `type`).
            vip_code: VIP credential supplied with the request.

        Returns:
            EnqueueResult with the ticket and its position in its class.

        Raises:
            ValidationError: If the request breaks an admission rule.
            PersistenceFailure: If the admission could not be persisted.
        """
        with get_tracer().start_as_current_span(SPAN_SUBMIT_TICKET) as span:
            try:
                ticket_input = validate_ticket_request(
                    request,
                    vip_code=vip_code,
                    vip_access_code=self._vip_access_code,
                )
            except ValidationError as e:
                self._metrics.record_ticket_rejected(e.code)
                span.set_attribute("ticket.rejected", e.code)
                logger.info(
                    "Ticket request rejected",
                    extra={"reason": e.code, "detail": e.message},
                )
                raise

            span.set_attribute("ticket.class", ticket_input.ticket_class.value)
            try:
                result = await self._store.enqueue(ticket_input.ticket_class, ticket_input)
            except PersistenceFailure:
                self._metrics.record_snapshot_failure()
                raise

            set_ticket_attributes(span, result.ticket, position=result.position_in_class)

        self._metrics.record_ticket_submitted(result.ticket.type.value)
        self._metrics.update_queue_depths(self._store.depths())
        return result

    async def dispatch_next(self) -> DispatchResult | None:
        """
        Serve the next ticket.

        Returns:
            DispatchResult, or None when no ticket is waiting.

        Raises:
            PersistenceFailure: If the dispatch could not be persisted.
        """
        with get_tracer().start_as_current_span(SPAN_DISPATCH_TICKET) as span:
            try:
                result = await self._dispatcher.dispatch_next()
            except PersistenceFailure:
                self._metrics.record_snapshot_failure()
                raise

            if result is None:
                span.set_attribute("ticket.none_waiting", True)
                return None

            set_ticket_attributes(span, result.ticket, remaining=result.remaining.total)

        self._metrics.record_ticket_dispatched(result.ticket_class.value)
        self._metrics.update_queue_depths(self._store.depths())
        logger.info(
            "Ticket dispatched",
            extra={
                "ticket_id": result.ticket.id,
                "ticket_class": result.ticket_class.value,
                "remaining": result.remaining.total,
            },
        )
        return result

    def queue_status(self, limit: int | None = None) -> QueueStatus:
        """
        Get counts and upcoming previews.

        Args:
            limit: Preview length per class. Defaults to the configured limit.
        """
        return QueueStatus(
            counts=self._query.aggregate_counts(),
            upcoming=self._query.upcoming(self._upcoming_limit if limit is None else limit),
        )

    def lookup_ticket(self, ticket_id: int) -> Ticket:
        """
        Get a waiting ticket by id.

        Raises:
            TicketNotFound: If no waiting ticket has this id, which includes
                tickets that were already served.
        """
        ticket = self._query.find_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFound(ticket_id)
        return ticket
