# model/api.py
from pydantic import BaseModel, Field, field_validator
from model.ticket import is_safe_ticket_id


class SaveTicketRequest(BaseModel):
    id: str = Field(min_length=1)
    operators: list[str] | None = None

    @field_validator("id")
    @classmethod
    def _file_safe_id(cls, v: str) -> str:
        if not is_safe_ticket_id(v):
            raise ValueError("ticket id cannot be used as a file name")
        return v


class HealthResponse(BaseModel):
    ok: bool
