from greenlight.applications.interfaces.dtos.movie import MovieInput, MoviePublic
from greenlight.domain.exceptions import FailedValidationError
from greenlight.domain.models.movie import Movie, validate_movie
from greenlight.domain.ports.repositories.movie_repository import MovieRepository
from greenlight.domain.services.validator import Validator
from greenlight.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)


class CreateMovieUseCase:
    def __init__(self, movie_repository: MovieRepository):
        self.movie_repository = movie_repository

    async def execute(self, movie_data: MovieInput) -> MoviePublic:
        movie = Movie(**movie_data.model_dump(exclude_none=True))

        v = Validator()
        validate_movie(v, movie)
        if not v.valid():
            logger.info(f"Rejected movie input: {v.errors}")
            raise FailedValidationError(v.errors)

        created_movie = await self.movie_repository.insert(movie)
        if created_movie.id is None or created_movie.version != 1:
            raise RuntimeError("Movie creation failed - store did not assign identity")

        logger.info(f"Movie created: id={created_movie.id} title={created_movie.title!r}")
        return MoviePublic.model_validate(created_movie)
