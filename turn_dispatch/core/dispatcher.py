"""
Dispatcher: picks the next ticket to serve.
"""

import logging

from turn_dispatch.constants import DISPATCH_ORDER
from turn_dispatch.store.repository import TicketStore
from turn_dispatch.types.ticket import DispatchResult, QueueCounts

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Serves tickets in strict class precedence (VIP, priority, general),
    FIFO within a class.
    """

    def __init__(self, store: TicketStore):
        self._store = store

    async def dispatch_next(self) -> DispatchResult | None:
        """
        Remove and return the next ticket to serve.

        Returns:
            DispatchResult with the served ticket and the counts left
            waiting, or None if every queue is empty.

        Raises:
            PersistenceFailure: If the removal cannot be persisted.
        """
        ticket = await self._store.pop_next(DISPATCH_ORDER)
        if ticket is None:
            logger.debug("Dispatch requested with no tickets waiting")
            return None

        return DispatchResult(
            ticket=ticket,
            ticket_class=ticket.type,
            remaining=QueueCounts.from_depths(self._store.depths()),
        )
