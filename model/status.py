# model/status.py
from datetime import datetime
from enum import Enum
from pydantic import BaseModel


class StatusKind(str, Enum):
    ok = "ok"
    invalid_format = "invalid_format"
    connect_failure = "connect_failure"
    http_status = "http_status"
    read_failure = "read_failure"
    parse_failure = "parse_failure"
    empty = "empty"
    no_valid_timestamps = "no_valid_timestamps"


# Display strings consumed by the UI; keep them byte-identical.
STATUS_OK = "OK"
STATUS_INVALID_FORMAT = "Invalid format. Expected: namespace/repository"
STATUS_CONNECT_FAILURE = "Failed to connect to Quay.io"
STATUS_HTTP_ERROR = "Quay.io error: {code}"
STATUS_READ_FAILURE = "Failed to read response"
STATUS_PARSE_ERROR = "Parse error: {message}"
STATUS_NO_TAGS = "No tags found"
STATUS_NO_VALID_TIMESTAMPS = "No valid timestamps found"


class StatusRecord(BaseModel):
    name: str
    lastUpdated: datetime | None = None
    sha256: str | None = None
    status: str
    kind: StatusKind

    @classmethod
    def failure(
        cls,
        name: str,
        kind: StatusKind,
        *,
        code: int | None = None,
        message: str = "",
    ) -> "StatusRecord":
        """
        Build a record for a non-OK outcome; `code` feeds http_status,
        `message` feeds parse_failure.
        """
        return cls(
            name=name,
            status=render_status(kind, code=code, message=message),
            kind=kind,
        )

    @classmethod
    def ok(cls, name: str, last_updated: datetime, digest: str) -> "StatusRecord":
        return cls(
            name=name,
            lastUpdated=last_updated,
            sha256=digest,
            status=STATUS_OK,
            kind=StatusKind.ok,
        )


def render_status(
    kind: StatusKind, *, code: int | None = None, message: str = ""
) -> str:
    if kind is StatusKind.ok:
        return STATUS_OK
    if kind is StatusKind.invalid_format:
        return STATUS_INVALID_FORMAT
    if kind is StatusKind.connect_failure:
        return STATUS_CONNECT_FAILURE
    if kind is StatusKind.http_status:
        return STATUS_HTTP_ERROR.format(code=code)
    if kind is StatusKind.read_failure:
        return STATUS_READ_FAILURE
    if kind is StatusKind.parse_failure:
        return STATUS_PARSE_ERROR.format(message=message)
    if kind is StatusKind.empty:
        return STATUS_NO_TAGS
    return STATUS_NO_VALID_TIMESTAMPS
