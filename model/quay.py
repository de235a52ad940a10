# model/quay.py
from typing import Any
from pydantic import BaseModel, field_validator, model_validator


class QuayTag(BaseModel):
    name: str = ""
    last_modified: str = ""
    manifest_digest: str = ""

    # JSON null reads as a blank tag / blank field
    @model_validator(mode="before")
    @classmethod
    def _null_tag(cls, data: Any) -> Any:
        return {} if data is None else data

    @field_validator("name", "last_modified", "manifest_digest", mode="before")
    @classmethod
    def _null_field(cls, v: Any) -> Any:
        return "" if v is None else v


class QuayTagResponse(BaseModel):
    tags: list[QuayTag] | None = None

    @model_validator(mode="before")
    @classmethod
    def _null_body(cls, data: Any) -> Any:
        return {} if data is None else data
