# routes.py
from fastapi import FastAPI
from controller.status_controller import status_router
from controller.ticket_controller import ticket_router
from controller.ui_controller import ui_router


def register_routes(app: FastAPI) -> None:
    """Register controllers here."""
    app.include_router(ticket_router)
    app.include_router(status_router)
    app.include_router(ui_router)
