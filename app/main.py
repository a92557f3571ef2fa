from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routes import router
from app.core.config import load_settings
from app.core.logging import configure_logging
from app.repositories.factory import create_metrics_repository


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    configure_logging(settings.log_level)
    repo = create_metrics_repository(settings)
    repo.initialize()
    app.state.metrics_repo = repo
    yield


app = FastAPI(
    title="ITR Summary Engine",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router)
