"""
Store module.
Contains the snapshot backend and the ticket store. Process-wide setup
lives in turn_dispatch.store.lifecycle.
"""

from turn_dispatch.store.repository import TicketStore
from turn_dispatch.store.snapshot import SnapshotStore

__all__ = [
    "TicketStore",
    "SnapshotStore",
]
