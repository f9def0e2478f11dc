from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from greenlight.domain.models.runtime import Runtime
from greenlight.domain.services.validator import Validator, unique

MIN_YEAR = 1888
MAX_TITLE_BYTES = 500
MAX_GENRES = 5


class Movie(BaseModel):
    title: str = ""
    year: int = 0
    runtime: Runtime = Runtime(0)
    genres: Optional[List[str]] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    deleted: bool = False
    version: int = 0


def validate_movie(v: Validator, movie: Movie, current_year: Optional[int] = None) -> None:
    if current_year is None:
        current_year = datetime.now().year

    v.check(movie.title != "", "title", "must be provided")
    v.check(len(movie.title.encode("utf-8")) <= MAX_TITLE_BYTES, "title", "must not be more than 500 bytes long")

    v.check(movie.year != 0, "year", "must be provided")
    v.check(movie.year >= MIN_YEAR, "year", "must be greater than 1888")
    v.check(movie.year <= current_year + 2, "year", "must not be more than two years in the future")

    v.check(movie.runtime != 0, "runtime", "must be provided")
    v.check(movie.runtime > 0, "runtime", "must be a positive whole number")

    v.check(movie.genres is not None, "genres", "must be provided")
    genres = movie.genres or []
    v.check(len(genres) >= 1, "genres", "must contain at least one genre")
    v.check(len(genres) <= MAX_GENRES, "genres", "must not contain more than five genres")
    v.check(unique(genres), "genres", "must not contain duplicate values")
