# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    BLUE = "\033[34m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    TICKET_NOT_FOUND = ErrorInfo("Ticket not found", status.HTTP_404_NOT_FOUND)
    TICKET_ID_REQUIRED = ErrorInfo("Ticket ID required", status.HTTP_400_BAD_REQUEST)
    INVALID_TICKET_ID = ErrorInfo("Invalid ticket ID", status.HTTP_400_BAD_REQUEST)
    SAVE_FAILED = ErrorInfo(
        "Failed to save ticket", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    DELETE_FAILED = ErrorInfo(
        "Failed to delete ticket", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
