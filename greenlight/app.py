from contextlib import asynccontextmanager

from fastapi import FastAPI

from greenlight.infrastructure.config.dependencies import get_settings
from greenlight.infrastructure.logging.logger import Logger, setup_logging
from greenlight.infrastructure.persistence.database import (
    build_engine,
    create_schema,
    dispose_engine,
    ping,
    set_engine,
)
from greenlight.presentation.errors import register_error_handlers
from greenlight.presentation.routers import healthcheck, movies

setup_logging()

logger = Logger.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    engine = build_engine(settings)
    set_engine(engine)
    try:
        await ping(engine, timeout=settings.DB_CONNECT_TIMEOUT)
        if settings.DB_CREATE_SCHEMA:
            await create_schema(engine)
        logger.info("database connection pool established")
        yield
    finally:
        await dispose_engine()


app = FastAPI(lifespan=lifespan)

register_error_handlers(app)

app.include_router(healthcheck.router)
app.include_router(movies.router)
