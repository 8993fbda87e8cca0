"""
Read-only views over the ticket store.
"""

from turn_dispatch.constants import DEFAULT_UPCOMING_LIMIT, TicketClass
from turn_dispatch.store.repository import TicketStore
from turn_dispatch.types.ticket import QueueCounts, Ticket, UpcomingPreview


class QueryService:
    """Counts, previews and lookups. Never mutates or persists."""

    def __init__(self, store: TicketStore):
        self._store = store

    def aggregate_counts(self) -> QueueCounts:
        return QueueCounts.from_depths(self._store.depths())

    def upcoming(self, limit: int = DEFAULT_UPCOMING_LIMIT) -> UpcomingPreview:
        """
        Preview the head of each queue.

        Args:
            limit: Maximum tickets per class.

        Returns:
            UpcomingPreview with up to `limit` tickets per class, head first.
        """
        if limit < 0:
            raise ValueError("limit must not be negative")
        return UpcomingPreview(
            vip=self._store.peek(TicketClass.VIP, limit),
            priority=self._store.peek(TicketClass.PRIORITY, limit),
            general=self._store.peek(TicketClass.GENERAL, limit),
        )

    def find_by_id(self, ticket_id: int) -> Ticket | None:
        """
        Find a waiting ticket by id.

        Served tickets are removed from the queues and are not found.
        """
        return next(
            (t for t in self._store.iter_waiting() if t.id == ticket_id),
            None,
        )
