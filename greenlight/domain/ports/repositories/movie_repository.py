from abc import ABC, abstractmethod
from typing import List, Optional

from greenlight.domain.models.movie import Movie


class MovieRepository(ABC):
    """Movie persistence with version-checked writes.

    Every call accepts an optional ``timeout`` (seconds) overriding the adapter default.
    Implementations raise ``NotFoundError``, ``EditConflictError`` or ``RepositoryError``
    (``StoreTimeoutError`` when the deadline passes).
    """

    @abstractmethod
    async def insert(self, movie: Movie, *, timeout: Optional[float] = None) -> Movie:
        pass

    @abstractmethod
    async def get(self, movie_id: int, *, timeout: Optional[float] = None) -> Movie:
        pass

    @abstractmethod
    async def get_all(self, *, timeout: Optional[float] = None) -> List[Movie]:
        pass

    @abstractmethod
    async def update(self, movie: Movie, *, timeout: Optional[float] = None) -> Movie:
        pass

    @abstractmethod
    async def delete(self, movie_id: int, *, timeout: Optional[float] = None) -> None:
        pass
