"""
Dispatch routes.
"""

from fastapi import APIRouter, Depends

from turn_dispatch.constants import API_V1_PREFIX
from turn_dispatch.core.service import TurnService
from turn_dispatch.store.lifecycle import get_service
from turn_dispatch.types.api import DispatchResponse, ErrorResponse

router = APIRouter(prefix=f"{API_V1_PREFIX}/dispatch", tags=["Dispatch"])


@router.post(
    "",
    response_model=DispatchResponse,
    summary="Serve the next ticket",
    description="Remove and return the next ticket: VIP first, then priority, then general.",
    responses={503: {"model": ErrorResponse}},
)
async def dispatch_next(
    service: TurnService = Depends(get_service),
) -> DispatchResponse:
    """
    Serve the next ticket.

    An empty queue is a normal outcome and answers 200 with no ticket.
    """
    result = await service.dispatch_next()

    if result is None:
        return DispatchResponse(message="No tickets waiting")

    return DispatchResponse(
        message="Ticket served",
        ticket_class=result.ticket_class,
        ticket=result.ticket,
        remaining=result.remaining,
    )
