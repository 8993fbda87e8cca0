"""
Store lifecycle management.
Builds the process-wide store and service on startup and hands them to
request handlers.
"""

import logging

from turn_dispatch.config import Settings, get_settings
from turn_dispatch.core.service import TurnService
from turn_dispatch.store.repository import TicketStore
from turn_dispatch.store.snapshot import SnapshotStore

logger = logging.getLogger(__name__)

# Global service instance
_service: TurnService | None = None


def init_store(settings: Settings | None = None) -> TurnService:
    """
    Load the snapshot and build the service.
    Should be called on application startup.

    Args:
        settings: Optional settings override. Uses the cached settings if not provided.

    Returns:
        TurnService: The initialized service.
    """
    global _service
    settings = settings or get_settings()

    store = TicketStore(SnapshotStore(settings.snapshot_path))
    _service = TurnService(
        store,
        vip_access_code=settings.vip_access_code,
        upcoming_limit=settings.upcoming_limit,
    )
    depths = store.depths()
    logger.info(
        "Ticket store initialized",
        extra={
            "snapshot_path": settings.snapshot_path,
            "waiting": sum(depths.values()),
        },
    )
    return _service


def close_store() -> None:
    """
    Release the service.
    Should be called on application shutdown. Every mutation is already on
    disk, so there is nothing to flush.
    """
    global _service
    if _service is not None:
        _service = None
        logger.info("Ticket store closed")


def is_initialized() -> bool:
    return _service is not None


def get_service() -> TurnService:
    """
    Dependency for getting the turn service.

    Returns:
        TurnService: The process-wide service.

    Raises:
        RuntimeError: If the store is not initialized.
    """
    if _service is None:
        raise RuntimeError("Store not initialized. Call init_store() first.")
    return _service
