import asyncio
from typing import Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy import false, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from greenlight.domain.exceptions import EditConflictError, NotFoundError, RepositoryError, StoreTimeoutError
from greenlight.domain.models.movie import Movie as DomainMovie
from greenlight.domain.ports.repositories.movie_repository import MovieRepository
from greenlight.infrastructure.logging.logger import Logger
from greenlight.infrastructure.persistence.models import Movie as SQLMovie

logger = Logger.get_logger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 3.0


class SQLAlchemyMovieRepository(MovieRepository):
    def __init__(self, session: AsyncSession, timeout: float = DEFAULT_TIMEOUT):
        self.session = session
        self.timeout = timeout

    def _to_domain(self, sql_movie: SQLMovie) -> DomainMovie:
        return DomainMovie(
            id=sql_movie.id,
            created_at=sql_movie.created_at,
            title=sql_movie.title,
            year=sql_movie.year,
            runtime=sql_movie.runtime,
            genres=list(sql_movie.genres),
            deleted=sql_movie.deleted,
            version=sql_movie.version,
        )

    async def _run(self, operation: Callable[[], Awaitable[T]], timeout: Optional[float]) -> T:
        """Run one store operation under a deadline, rolling back on any failure or cancellation."""
        deadline = self.timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(operation(), timeout=deadline)
        except asyncio.CancelledError:
            await self._rollback()
            raise
        except asyncio.TimeoutError as e:
            await self._rollback()
            raise StoreTimeoutError(deadline) from e
        except SQLAlchemyError as e:
            await self._rollback()
            raise RepositoryError(str(e)) from e

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed after store error")

    async def insert(self, movie: DomainMovie, *, timeout: Optional[float] = None) -> DomainMovie:
        async def _insert() -> DomainMovie:
            sql_movie = SQLMovie(
                title=movie.title,
                year=movie.year,
                runtime=int(movie.runtime),
                genres=list(movie.genres or []),
            )
            self.session.add(sql_movie)
            await self.session.commit()
            await self.session.refresh(sql_movie)
            return self._to_domain(sql_movie)

        return await self._run(_insert, timeout)

    async def get(self, movie_id: int, *, timeout: Optional[float] = None) -> DomainMovie:
        if movie_id < 1:
            raise NotFoundError()

        async def _get() -> Optional[SQLMovie]:
            return await self.session.scalar(
                select(SQLMovie)
                .where(SQLMovie.id == movie_id, SQLMovie.deleted.is_(false()))
                .execution_options(populate_existing=True)
            )

        sql_movie = await self._run(_get, timeout)
        if sql_movie is None:
            raise NotFoundError()
        return self._to_domain(sql_movie)

    async def get_all(self, *, timeout: Optional[float] = None) -> List[DomainMovie]:
        async def _get_all() -> List[SQLMovie]:
            result = await self.session.scalars(
                select(SQLMovie)
                .where(SQLMovie.deleted.is_(false()))
                .order_by(SQLMovie.id)
                .execution_options(populate_existing=True)
            )
            return list(result.all())

        sql_movies = await self._run(_get_all, timeout)
        return [self._to_domain(sql_movie) for sql_movie in sql_movies]

    async def update(self, movie: DomainMovie, *, timeout: Optional[float] = None) -> DomainMovie:
        if movie.id is None:
            raise EditConflictError()

        # Single conditional statement: the version check and the write are one atomic step.
        stmt = (
            update(SQLMovie)
            .where(
                SQLMovie.id == movie.id,
                SQLMovie.version == movie.version,
                SQLMovie.deleted.is_(false()),
            )
            .values(
                title=movie.title,
                year=movie.year,
                runtime=int(movie.runtime),
                genres=list(movie.genres or []),
                version=SQLMovie.version + 1,
            )
            .returning(SQLMovie.version)
            .execution_options(synchronize_session=False)
        )

        async def _update() -> Optional[int]:
            result = await self.session.execute(stmt)
            new_version = result.scalar_one_or_none()
            if new_version is None:
                await self.session.rollback()
                return None
            await self.session.commit()
            return new_version

        new_version = await self._run(_update, timeout)
        if new_version is None:
            raise EditConflictError()
        return movie.model_copy(update={"version": new_version})

    async def delete(self, movie_id: int, *, timeout: Optional[float] = None) -> None:
        if movie_id < 1:
            raise NotFoundError()

        stmt = (
            update(SQLMovie)
            .where(SQLMovie.id == movie_id, SQLMovie.deleted.is_(false()))
            .values(deleted=True)
            .execution_options(synchronize_session=False)
        )

        async def _delete() -> int:
            result = await self.session.execute(stmt)
            await self.session.commit()
            return result.rowcount or 0

        rows_affected = await self._run(_delete, timeout)
        if rows_affected == 0:
            raise NotFoundError()
