from typing import Optional

from greenlight.applications.interfaces.dtos.movie import MovieInput, MoviePublic
from greenlight.domain.exceptions import EditConflictError, FailedValidationError
from greenlight.domain.models.movie import validate_movie
from greenlight.domain.ports.repositories.movie_repository import MovieRepository
from greenlight.domain.services.validator import Validator
from greenlight.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)


class UpdateMovieUseCase:
    """Partial update: fields left out of the input keep their stored values."""

    def __init__(self, movie_repository: MovieRepository):
        self.movie_repository = movie_repository

    async def execute(
        self, movie_id: int, movie_data: MovieInput, expected_version: Optional[str] = None
    ) -> MoviePublic:
        existing_movie = await self.movie_repository.get(movie_id)

        if expected_version is not None and expected_version.strip() != str(existing_movie.version):
            logger.info(
                f"Expected version {expected_version!r} does not match movie {movie_id} "
                f"at version {existing_movie.version}"
            )
            raise EditConflictError()

        movie = existing_movie.model_copy(update=movie_data.model_dump(exclude_none=True))

        v = Validator()
        validate_movie(v, movie)
        if not v.valid():
            logger.info(f"Rejected update for movie {movie_id}: {v.errors}")
            raise FailedValidationError(v.errors)

        updated_movie = await self.movie_repository.update(movie)
        logger.info(f"Movie {movie_id} updated to version {updated_movie.version}")
        return MoviePublic.model_validate(updated_movie)
