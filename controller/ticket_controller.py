# controller/ticket_controller.py
from typing import Dict
from fastapi import APIRouter, Depends, Query, Response, status
from controller.controller_dependencies import get_ticket_service
from model.api import SaveTicketRequest
from model.ticket import Ticket
from service.ticket_service import TicketService
from util.constants import InternalURIs

ticket_router = APIRouter()


@ticket_router.get(InternalURIs.TICKETS, response_model=Dict[str, Ticket])
async def list_tickets(
    service: TicketService = Depends(get_ticket_service),
) -> Dict[str, Ticket]:
    return await service.list_tickets()


@ticket_router.post(
    InternalURIs.TICKETS, response_model=Ticket, status_code=status.HTTP_200_OK
)
async def save_ticket(
    payload: SaveTicketRequest,
    service: TicketService = Depends(get_ticket_service),
) -> Ticket:
    return await service.save_ticket(payload)


@ticket_router.delete(InternalURIs.TICKETS)
async def delete_ticket(
    id: str | None = Query(default=None),
    service: TicketService = Depends(get_ticket_service),
) -> Response:
    await service.delete_ticket(id)
    return Response(status_code=status.HTTP_200_OK)
