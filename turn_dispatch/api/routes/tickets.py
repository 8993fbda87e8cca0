"""
Ticket admission and lookup routes.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Header, status

from turn_dispatch.constants import API_V1_PREFIX, VIP_CODE_HEADER
from turn_dispatch.core.service import TurnService
from turn_dispatch.store.lifecycle import get_service
from turn_dispatch.types.api import (
    ErrorResponse,
    SubmitTicketRequest,
    SubmitTicketResponse,
)
from turn_dispatch.types.ticket import Ticket

router = APIRouter(prefix=f"{API_V1_PREFIX}/tickets", tags=["Tickets"])


@router.post(
    "",
    response_model=SubmitTicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a ticket",
    description="Register a new ticket in its class queue. VIP tickets need the VIP code header.",
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {"schema": SubmitTicketRequest.model_json_schema()},
            },
        },
    },
)
async def submit_ticket(
    body: Annotated[Any, Body()] = None,
    vip_code: Annotated[str | None, Header(alias=VIP_CODE_HEADER)] = None,
    service: TurnService = Depends(get_service),
) -> SubmitTicketResponse:
    """
    Register a ticket.

    The body is taken as-is so that an empty or non-object body is rejected
    by the admission rules as missing fields.

    Args:
        body: Ticket request body, if any.
        vip_code: Shared VIP code, only checked for VIP tickets.
        service: The turn service.

    Returns:
        SubmitTicketResponse with the ticket and its position in its class.
    """
    request = {} if body is None else body
    result = await service.submit_ticket(request, vip_code=vip_code)

    return SubmitTicketResponse(
        ticket=result.ticket,
        position_in_class=result.position_in_class,
    )


@router.get(
    "/{ticket_id}",
    response_model=Ticket,
    summary="Get ticket details",
    description="Get a waiting ticket by id. Served tickets are no longer listed.",
    responses={404: {"model": ErrorResponse}},
)
async def get_ticket(
    ticket_id: int,
    service: TurnService = Depends(get_service),
) -> Ticket:
    """
    Get a waiting ticket by id.

    Raises:
        TicketNotFound: If the ticket is not waiting in any queue.
    """
    return service.lookup_ticket(ticket_id)
