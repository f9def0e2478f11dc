from greenlight.applications.interfaces.dtos.envelope import MessageEnvelope
from greenlight.domain.ports.repositories.movie_repository import MovieRepository


class DeleteMovieUseCase:
    def __init__(self, movie_repository: MovieRepository):
        self.movie_repository = movie_repository

    async def execute(self, movie_id: int) -> MessageEnvelope:
        await self.movie_repository.delete(movie_id)
        return MessageEnvelope(message="movie successfully deleted")
