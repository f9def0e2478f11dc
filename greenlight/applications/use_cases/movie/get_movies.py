from typing import List

from greenlight.applications.interfaces.dtos.movie import MoviePublic
from greenlight.domain.ports.repositories.movie_repository import MovieRepository


class GetMoviesUseCase:
    def __init__(self, movie_repository: MovieRepository):
        self.movie_repository = movie_repository

    async def execute(self) -> List[MoviePublic]:
        movies = await self.movie_repository.get_all()
        return [MoviePublic.model_validate(movie) for movie in movies]
