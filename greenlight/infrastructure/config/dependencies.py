from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from greenlight.domain.ports.repositories.movie_repository import MovieRepository
from greenlight.domain.ports.services.logger import LoggerPort
from greenlight.infrastructure.adapters.repositories.sqlalchemy_movie_repository import SQLAlchemyMovieRepository
from greenlight.infrastructure.config.settings import Settings
from greenlight.infrastructure.logging.std_logger_adapter import StdLoggerAdapter
from greenlight.infrastructure.persistence.database import get_session


def get_logger() -> LoggerPort:
    return StdLoggerAdapter("greenlight.api")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def get_movie_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MovieRepository:
    return SQLAlchemyMovieRepository(session, timeout=settings.DB_QUERY_TIMEOUT)
