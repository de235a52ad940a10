# controller/status_controller.py
from typing import List
from fastapi import APIRouter, Depends, Query
from controller.controller_dependencies import get_ticket_service
from model.status import StatusRecord
from service.ticket_service import TicketService
from util.constants import InternalURIs

status_router = APIRouter()


@status_router.get(InternalURIs.STATUS, response_model=List[StatusRecord])
async def get_status(
    ticket: str | None = Query(default=None),
    service: TicketService = Depends(get_ticket_service),
) -> List[StatusRecord]:
    return await service.get_statuses(ticket)
