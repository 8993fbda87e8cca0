"""
Ticket store.
Owns the three class queues and keeps them in step with the durable snapshot.
"""

import asyncio
import itertools
import logging
from collections import deque
from collections.abc import Callable, Coroutine, Iterator, Sequence
from datetime import datetime, timezone
from typing import Any, TypeVar

from turn_dispatch.constants import DISPATCH_ORDER, SPAN_SAVE_SNAPSHOT, TicketClass
from turn_dispatch.observability.tracing import get_tracer
from turn_dispatch.store.snapshot import SnapshotStore
from turn_dispatch.types.ticket import (
    EnqueueResult,
    QueueSnapshot,
    Ticket,
    TicketInput,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TicketStore:
    """
    In-memory three-class queue backed by a snapshot file.

    Implements atomic operations for:
    - Ticket admission with strictly increasing ids
    - Head removal in a caller-supplied class order

    Every mutation holds the store lock across select, persist and commit.
    The in-memory queues only change after the snapshot write succeeded and
    the commit step never awaits, so synchronous readers on the same event
    loop always see a committed state without taking the lock. Cancelling a
    caller does not split the write from its commit.
    """

    def __init__(
        self,
        snapshot_store: SnapshotStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the store and load the persisted state.

        Args:
            snapshot_store: Durable snapshot backend.
            clock: Source of admission timestamps.
        """
        self._snapshots = snapshot_store
        self._clock = clock
        self._lock = asyncio.Lock()
        self._queues: dict[TicketClass, deque[Ticket]] = {
            ticket_class: deque() for ticket_class in DISPATCH_ORDER
        }
        self._last_issued_id = 0
        self._restore(self.snapshot_load())

    def _restore(self, snapshot: QueueSnapshot) -> None:
        for ticket_class in DISPATCH_ORDER:
            self._queues[ticket_class] = deque(snapshot.tickets_for(ticket_class))
        self._last_issued_id = snapshot.last_issued_id

    @property
    def last_issued_id(self) -> int:
        return self._last_issued_id

    def snapshot_load(self) -> QueueSnapshot:
        """Read the durable snapshot, empty if missing or corrupt."""
        return self._snapshots.load()

    def snapshot_save(self, snapshot: QueueSnapshot) -> None:
        """
        Write the full state durably.

        Raises:
            PersistenceFailure: If the write fails.
        """
        self._snapshots.save(snapshot)

    def current_snapshot(self) -> QueueSnapshot:
        """Get a snapshot of the committed in-memory state."""
        return QueueSnapshot.from_queues(self._queues, self._last_issued_id)

    async def _persist(self, snapshot: QueueSnapshot) -> None:
        with get_tracer().start_as_current_span(SPAN_SAVE_SNAPSHOT):
            await asyncio.to_thread(self.snapshot_save, snapshot)

    async def _run_uncancelled(self, step: Coroutine[Any, Any, T]) -> T:
        """
        Run a persist-then-commit step to completion.

        The snapshot write keeps running in its worker thread when the caller
        is cancelled, so the in-memory commit has to follow it. The step runs
        as its own task and the store lock is only released once it is done;
        the cancellation is re-raised afterwards.
        """
        task = asyncio.ensure_future(step)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            while not task.done():
                try:
                    await asyncio.wait({task})
                except asyncio.CancelledError:
                    continue
            logger.warning("Caller cancelled during a queue write, write completed anyway")
            raise

    def _next_id(self, created_at: datetime) -> int:
        # Millisecond timestamp, bumped past the last id when the clock has not moved
        return max(int(created_at.timestamp() * 1000), self._last_issued_id + 1)

    async def _append(self, ticket: Ticket) -> int:
        queue = self._queues[ticket.type]
        queues = dict(self._queues)
        queues[ticket.type] = [*queue, ticket]
        await self._persist(QueueSnapshot.from_queues(queues, ticket.id))

        queue.append(ticket)
        self._last_issued_id = ticket.id
        return len(queue)

    async def _remove_head(self, ticket_class: TicketClass) -> Ticket:
        queues = dict(self._queues)
        queues[ticket_class] = itertools.islice(self._queues[ticket_class], 1, None)
        await self._persist(QueueSnapshot.from_queues(queues, self._last_issued_id))

        return self._queues[ticket_class].popleft()

    async def enqueue(
        self,
        ticket_class: TicketClass,
        ticket_input: TicketInput,
    ) -> EnqueueResult:
        """
        Admit a ticket at the tail of its class queue.

        Args:
            ticket_class: Queue to append to.
            ticket_input: Validated request data.

        Returns:
            EnqueueResult with the stored ticket and its 1-based position.

        Raises:
            PersistenceFailure: If the snapshot cannot be written. Nothing is
                admitted in that case.
        """
        async with self._lock:
            created_at = self._clock()
            ticket = Ticket(
                id=self._next_id(created_at),
                name=ticket_input.name,
                age=ticket_input.age,
                type=ticket_class,
                created_at=created_at,
                served=False,
            )
            position = await self._run_uncancelled(self._append(ticket))

        logger.info(
            "Ticket enqueued",
            extra={
                "ticket_id": ticket.id,
                "ticket_class": ticket_class.value,
                "position": position,
            },
        )
        return EnqueueResult(ticket=ticket, position_in_class=position)

    async def pop_next(self, order: Sequence[TicketClass]) -> Ticket | None:
        """
        Remove the head of the first non-empty queue in `order`.

        Args:
            order: Classes to try, highest precedence first.

        Returns:
            The removed ticket marked as served, or None if every queue in
            `order` is empty.

        Raises:
            PersistenceFailure: If the snapshot cannot be written. The ticket
                stays at the head of its queue in that case.
        """
        async with self._lock:
            ticket_class = next(
                (c for c in order if self._queues[c]),
                None,
            )
            if ticket_class is None:
                return None

            head = await self._run_uncancelled(self._remove_head(ticket_class))

        logger.info(
            "Ticket removed from queue",
            extra={"ticket_id": head.id, "ticket_class": ticket_class.value},
        )
        return head.model_copy(update={"served": True})

    def depths(self) -> dict[TicketClass, int]:
        """Get the number of waiting tickets per class, in dispatch order."""
        return {c: len(self._queues[c]) for c in DISPATCH_ORDER}

    def peek(self, ticket_class: TicketClass, limit: int) -> list[Ticket]:
        """Get up to `limit` tickets from the head of a queue without removing them."""
        return list(itertools.islice(self._queues[ticket_class], limit))

    def iter_waiting(self) -> Iterator[Ticket]:
        """Iterate over every waiting ticket, in dispatch order."""
        for ticket_class in DISPATCH_ORDER:
            yield from self._queues[ticket_class]
