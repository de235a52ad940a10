# service/ticket_service.py
import asyncio
import logging
from typing import Dict, List
from config.settings import settings
from model.api import SaveTicketRequest
from model.status import StatusRecord
from model.ticket import Ticket, is_safe_ticket_id
from repository.ticket_repository import TicketRepository
from service.quay_service import QuayService
from util.enums import ErrorMessage
from util.errors import AppError, PersistenceError
from util.timing import timed

logger = logging.getLogger(__name__)


class TicketService:
    def __init__(
        self,
        tickets: TicketRepository,
        quay: QuayService,
        concurrency: int | None = None,
    ) -> None:
        self._tickets = tickets
        self._quay = quay
        if concurrency is None:
            concurrency = settings.STATUS_CONCURRENCY
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self._concurrency = concurrency

    async def list_tickets(self) -> Dict[str, Ticket]:
        return await self._tickets.list()

    async def save_ticket(self, payload: SaveTicketRequest) -> Ticket:
        ticket = Ticket(id=payload.id, operators=payload.operators or [])
        try:
            return await self._tickets.upsert(ticket)
        except PersistenceError as e:
            logger.error("ticket.save.error ticket=%s err=%s", ticket.id, e)
            raise AppError.of(ErrorMessage.SAVE_FAILED)

    async def delete_ticket(self, ticket_id: str | None) -> None:
        if not ticket_id:
            raise AppError.of(ErrorMessage.TICKET_ID_REQUIRED)
        if not is_safe_ticket_id(ticket_id):
            raise AppError.of(ErrorMessage.INVALID_TICKET_ID)
        try:
            await self._tickets.delete(ticket_id)
        except PersistenceError as e:
            logger.error("ticket.delete.error ticket=%s err=%s", ticket_id, e)
            raise AppError.of(ErrorMessage.DELETE_FAILED)

    async def get_statuses(self, ticket_id: str | None) -> List[StatusRecord]:
        """
        Resolve every operator of the ticket, in stored order.
        One registry call at a time unless STATUS_CONCURRENCY > 1.
        """
        ticket = await self._tickets.get(ticket_id or "")
        if ticket is None:
            raise AppError.of(ErrorMessage.TICKET_NOT_FOUND)

        with timed(
            logger,
            "ticket.status",
            ticket=ticket.id,
            operators=len(ticket.operators),
            conc=self._concurrency,
        ):
            if self._concurrency == 1:
                return [await self._quay.resolve(op) for op in ticket.operators]

            sem = asyncio.Semaphore(self._concurrency)

            async def _one(operator: str) -> StatusRecord:
                async with sem:
                    return await self._quay.resolve(operator)

            # gather keeps results in operator order
            return list(await asyncio.gather(*(_one(op) for op in ticket.operators)))
