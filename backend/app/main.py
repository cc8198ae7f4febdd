# TrainerBox backend entrypoint: FastAPI app over the storage repository.

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import clients
from backend.app.api import dashboard
from backend.app.api import health
from backend.app.api import payments
from backend.app.api import reminders
from backend.app.api import sessions
from backend.app.core.events import ChangeNotifier
from backend.app.core.logging_config import configure_logging
from backend.app.core.settings import get_settings
from backend.app.services.repository import Repository
from backend.app.storage.selector import select_backend

logger = logging.getLogger(__name__)

origins = [
    "http://localhost:8100",
    "http://127.0.0.1:8100",
    "http://localhost:5173",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.repository is None:
        app.state.repository = Repository(select_backend(get_settings()), ChangeNotifier())
        logger.info("Using %s storage", app.state.repository.backend_name)
    yield
    repository = getattr(app.state, "repository", None)
    if repository is not None:
        logger.info("Closing %s storage", repository.backend_name)
        repository.close()


def create_app(repository: Repository | None = None) -> FastAPI:
    """Build the API. Without a repository, the lifespan handler selects one from settings."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version=settings.api_version, lifespan=lifespan)
    app.state.repository = repository

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(clients.router)
    app.include_router(payments.router)
    app.include_router(sessions.router)
    app.include_router(reminders.router)
    app.include_router(dashboard.router)

    @app.get("/")
    def read_root():
        return {"app": f"{settings.app_name} backend", "status": "ok"}

    return app


app = create_app()
