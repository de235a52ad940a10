# main.py
import routes
from contextlib import asynccontextmanager
from util.enums import Environment, Color
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from controller.ui_controller import STATIC_DIR
from model.api import HealthResponse
from repository.ticket_repository import TicketRepository
from util.constants import InternalURIs
from util.errors import PersistenceError
from util.logger import init_logger


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    logger = init_logger()
    print(f"{Color.GREEN}Starting Operator Update Tracker...{Color.RESET}")
    try:
        # Unusable data directory aborts startup
        fastApi.state.tickets = TicketRepository.open(settings.DATA_DIR)
    except PersistenceError as e:
        logger.critical("store.init.failed err=%s", e)
        raise
    print(f"{Color.BLUE}Server Started{Color.RESET}")

    try:
        yield
    finally:
        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(title="operator-update-tracker", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=False,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type", "Accept"],
)

app.mount(InternalURIs.STATIC, StaticFiles(directory=STATIC_DIR), name="static")


@app.get(InternalURIs.HEALTHZ, response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse(ok=True)


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)
