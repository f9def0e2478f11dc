from typing import Dict, List, Union

from pydantic import BaseModel

from greenlight.applications.interfaces.dtos.movie import MoviePublic


class MovieEnvelope(BaseModel):
    movie: MoviePublic


class MovieListEnvelope(BaseModel):
    movies: List[MoviePublic]


class ErrorEnvelope(BaseModel):
    error: str


class ValidationErrorEnvelope(BaseModel):
    error: Dict[str, str]


class MessageEnvelope(BaseModel):
    message: str


class SystemInfo(BaseModel):
    environment: str
    version: str
    hostname: str


class HealthcheckEnvelope(BaseModel):
    status: str
    system_info: SystemInfo


Envelope = Union[
    MovieEnvelope,
    MovieListEnvelope,
    ErrorEnvelope,
    ValidationErrorEnvelope,
    MessageEnvelope,
    HealthcheckEnvelope,
]
