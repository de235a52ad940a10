# controller/controller_dependencies.py
from fastapi import Depends, Request
from repository.ticket_repository import TicketRepository
from service.quay_service import QuayService
from service.ticket_service import TicketService


def get_ticket_repository(request: Request) -> TicketRepository:
    # Opened once in main.lifespan
    return request.app.state.tickets


def get_quay_service() -> QuayService:
    return QuayService()


def get_ticket_service(
    tickets: TicketRepository = Depends(get_ticket_repository),
    quay: QuayService = Depends(get_quay_service),
) -> TicketService:
    return TicketService(tickets, quay)
