"""
Unit tests for the dispatcher.
"""

import random
from collections.abc import Callable

from turn_dispatch.constants import DISPATCH_ORDER, TicketClass
from turn_dispatch.core.dispatcher import Dispatcher
from turn_dispatch.store.repository import TicketStore
from turn_dispatch.types.ticket import TicketInput


class TestDispatcher:
    """Tests for Dispatcher.dispatch_next."""

    async def test_empty_store_returns_none(self, store: TicketStore):
        """Test that nothing waiting is a normal outcome."""
        assert await Dispatcher(store).dispatch_next() is None

    async def test_class_precedence(
        self,
        store: TicketStore,
        make_input: Callable[..., TicketInput],
    ):
        """Test that vip, priority and general are served in that order."""
        general = await store.enqueue(TicketClass.GENERAL, make_input(name="Luis"))
        priority = await store.enqueue(TicketClass.PRIORITY, make_input(name="Rosa"))
        vip = await store.enqueue(TicketClass.VIP, make_input(name="Ana"))
        dispatcher = Dispatcher(store)

        served = [await dispatcher.dispatch_next() for _ in range(3)]

        assert [r.ticket.id for r in served] == [
            vip.ticket.id,
            priority.ticket.id,
            general.ticket.id,
        ]
        assert [r.ticket_class for r in served] == list(DISPATCH_ORDER)
        assert await dispatcher.dispatch_next() is None

    async def test_fifo_within_class(
        self,
        store: TicketStore,
        make_input: Callable[..., TicketInput],
    ):
        """Test that a class is served in admission order."""
        names = ["Luis", "Marta", "Pablo", "Sara"]
        for name in names:
            await store.enqueue(TicketClass.GENERAL, make_input(name=name))
        dispatcher = Dispatcher(store)

        served = [(await dispatcher.dispatch_next()).ticket.name for _ in names]

        assert served == names

    async def test_remaining_counts(
        self,
        store: TicketStore,
        make_input: Callable[..., TicketInput],
    ):
        """Test that remaining counts reflect the queues after removal."""
        await store.enqueue(TicketClass.VIP, make_input())
        await store.enqueue(TicketClass.VIP, make_input())
        await store.enqueue(TicketClass.GENERAL, make_input())

        result = await Dispatcher(store).dispatch_next()

        assert result.ticket.served is True
        assert result.remaining.vip == 1
        assert result.remaining.priority == 0
        assert result.remaining.general == 1
        assert result.remaining.total == 2

    async def test_mixed_admissions_order(
        self,
        store: TicketStore,
        make_input: Callable[..., TicketInput],
    ):
        """Test the full dispatch order for an interleaved admission sequence."""
        rng = random.Random(1234)
        admitted: dict[TicketClass, list[int]] = {c: [] for c in DISPATCH_ORDER}
        for _ in range(30):
            ticket_class = rng.choice(DISPATCH_ORDER)
            result = await store.enqueue(ticket_class, make_input())
            admitted[ticket_class].append(result.ticket.id)
        dispatcher = Dispatcher(store)

        served = []
        while (result := await dispatcher.dispatch_next()) is not None:
            served.append(result.ticket.id)

        expected = [i for c in DISPATCH_ORDER for i in admitted[c]]
        assert served == expected
