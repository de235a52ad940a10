# controller/ui_controller.py
import os
from fastapi import APIRouter
from fastapi.responses import FileResponse
from util.constants import InternalURIs

STATIC_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "static")

ui_router = APIRouter()


@ui_router.get(InternalURIs.INDEX, include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(os.path.join(STATIC_DIR, "index.html"), media_type="text/html")
