# model/ticket.py
from datetime import datetime
from pydantic import BaseModel, Field


def is_safe_ticket_id(ticket_id: str) -> bool:
    """
    Ticket ids double as file names in the data directory; reject only what
    would escape it or cannot be a file name.
    """
    if not ticket_id or ticket_id in (".", ".."):
        return False
    if "/" in ticket_id or "\\" in ticket_id:
        return False
    return not any(ord(ch) < 32 or ord(ch) == 127 for ch in ticket_id)


class Ticket(BaseModel):
    id: str
    operators: list[str] = Field(default_factory=list)
    added: datetime | None = None
