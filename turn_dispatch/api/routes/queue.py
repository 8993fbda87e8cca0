"""
Queue status routes.
"""

from fastapi import APIRouter, Depends, Query

from turn_dispatch.constants import API_V1_PREFIX
from turn_dispatch.core.service import TurnService
from turn_dispatch.store.lifecycle import get_service
from turn_dispatch.types.ticket import QueueStatus

router = APIRouter(prefix=f"{API_V1_PREFIX}/queue", tags=["Queue"])


@router.get(
    "",
    response_model=QueueStatus,
    summary="Get queue status",
    description="Waiting counts per class and the next tickets in each class.",
)
async def get_queue_status(
    limit: int | None = Query(default=None, ge=0, le=100),
    service: TurnService = Depends(get_service),
) -> QueueStatus:
    """
    Get counts and upcoming previews.

    Args:
        limit: Preview length per class. Uses the configured default if omitted.
        service: The turn service.
    """
    return service.queue_status(limit)
