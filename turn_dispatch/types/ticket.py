"""
Ticket and queue type definitions.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from turn_dispatch.constants import DISPATCH_ORDER, TicketClass


class Ticket(BaseModel):
    """
    A single admitted turn waiting to be served.

    Serialised with camelCase `createdAt` both on the wire and in the
    snapshot file. Instances are frozen because the queues hand them out
    directly to readers; dispatch produces a served copy.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    name: str
    age: int
    type: TicketClass
    created_at: datetime = Field(alias="createdAt")
    served: bool = False


@dataclass(frozen=True)
class TicketInput:
    """Normalized ticket request produced by the validator."""

    name: str
    age: int
    ticket_class: TicketClass


@dataclass
class EnqueueResult:
    """Outcome of an admission: the stored ticket and its 1-based place in its class."""

    ticket: Ticket
    position_in_class: int


class QueueCounts(BaseModel):
    """Waiting tickets per class."""

    vip: int = 0
    priority: int = 0
    general: int = 0
    total: int = 0

    @classmethod
    def from_depths(cls, depths: Mapping[TicketClass, int]) -> "QueueCounts":
        """Build counts from a per-class depth mapping."""
        return cls(
            vip=depths[TicketClass.VIP],
            priority=depths[TicketClass.PRIORITY],
            general=depths[TicketClass.GENERAL],
            total=sum(depths.values()),
        )


class UpcomingPreview(BaseModel):
    """Head-first preview of each class queue."""

    vip: list[Ticket] = Field(default_factory=list)
    priority: list[Ticket] = Field(default_factory=list)
    general: list[Ticket] = Field(default_factory=list)


@dataclass
class DispatchResult:
    """
    Outcome of a dispatch.

    `ticket` is already marked served and `remaining` reflects the queues
    after its removal.
    """

    ticket: Ticket
    ticket_class: TicketClass
    remaining: QueueCounts


class QueueStatus(BaseModel):
    """Aggregate counts plus upcoming previews."""

    counts: QueueCounts
    upcoming: UpcomingPreview


class QueueSnapshot(BaseModel):
    """
    Durable representation of the whole queue state.

    Key constraints:
    - every ticket sits in the list named after its own class
    - ids are unique across all three lists
    - `last_issued_id` is never below the highest stored id
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    last_issued_id: int = Field(default=0, alias="lastIssuedId", ge=0)
    vip: list[Ticket] = Field(default_factory=list)
    priority: list[Ticket] = Field(default_factory=list)
    general: list[Ticket] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_consistency(self) -> "QueueSnapshot":
        seen: set[int] = set()
        for ticket_class in DISPATCH_ORDER:
            for ticket in self.tickets_for(ticket_class):
                if ticket.type != ticket_class:
                    raise ValueError(
                        f"ticket {ticket.id} of type {ticket.type} stored under {ticket_class}"
                    )
                if ticket.id in seen:
                    raise ValueError(f"duplicate ticket id {ticket.id}")
                seen.add(ticket.id)
        if seen and max(seen) > self.last_issued_id:
            self.last_issued_id = max(seen)
        return self

    def tickets_for(self, ticket_class: TicketClass) -> list[Ticket]:
        """Get the stored list for a class."""
        return {
            TicketClass.VIP: self.vip,
            TicketClass.PRIORITY: self.priority,
            TicketClass.GENERAL: self.general,
        }[ticket_class]

    @classmethod
    def from_queues(
        cls,
        queues: Mapping[TicketClass, Iterable[Ticket]],
        last_issued_id: int,
    ) -> "QueueSnapshot":
        """Build a snapshot from per-class ticket sequences."""
        return cls(
            last_issued_id=last_issued_id,
            vip=list(queues[TicketClass.VIP]),
            priority=list(queues[TicketClass.PRIORITY]),
            general=list(queues[TicketClass.GENERAL]),
        )
