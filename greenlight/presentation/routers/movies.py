from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Request

from greenlight.applications.interfaces.dtos.envelope import MovieEnvelope, MovieListEnvelope
from greenlight.applications.interfaces.dtos.movie import MovieInput
from greenlight.applications.use_cases.movie.create_movie import CreateMovieUseCase
from greenlight.applications.use_cases.movie.delete_movie import DeleteMovieUseCase
from greenlight.applications.use_cases.movie.get_movie import GetMovieUseCase
from greenlight.applications.use_cases.movie.get_movies import GetMoviesUseCase
from greenlight.applications.use_cases.movie.update_movie import UpdateMovieUseCase
from greenlight.domain.exceptions import EditConflictError, FailedValidationError, NotFoundError, RepositoryError
from greenlight.domain.ports.repositories.movie_repository import MovieRepository
from greenlight.domain.ports.services.logger import LoggerPort
from greenlight.infrastructure.config.dependencies import get_logger, get_movie_repository, get_settings
from greenlight.infrastructure.config.settings import Settings
from greenlight.presentation.envelope import BodyDecodeError, EnvelopeEncodeError, read_json, write_json
from greenlight.presentation.errors import (
    bad_request_response,
    client_closed_response,
    edit_conflict_response,
    failed_validation_response,
    not_found_response,
    server_error_response,
)
from greenlight.presentation.helpers import ClientDisconnectedError, cancel_on_disconnect, read_id_param

router = APIRouter(prefix="/v1/movies", tags=["movies"])

MovieRepositoryDep = Annotated[MovieRepository, Depends(get_movie_repository)]
LoggerDep = Annotated[LoggerPort, Depends(get_logger)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.post("")
async def create_movie(
    request: Request, movie_repository: MovieRepositoryDep, logger: LoggerDep, settings: SettingsDep
):
    try:
        movie_data = await read_json(request, MovieInput, settings.MAX_BODY_BYTES)
        use_case = CreateMovieUseCase(movie_repository)
        movie = await cancel_on_disconnect(request, use_case.execute(movie_data))
        return write_json(
            HTTPStatus.CREATED, MovieEnvelope(movie=movie), headers={"Location": f"/v1/movies/{movie.id}"}
        )
    except BodyDecodeError as e:
        return bad_request_response(logger, request, e)
    except FailedValidationError as e:
        return failed_validation_response(logger, request, e.errors)
    except ClientDisconnectedError:
        return client_closed_response(logger, request)
    except (RepositoryError, EnvelopeEncodeError) as e:
        return server_error_response(logger, request, e)


@router.get("")
async def read_movies(request: Request, movie_repository: MovieRepositoryDep, logger: LoggerDep):
    try:
        use_case = GetMoviesUseCase(movie_repository)
        movies = await cancel_on_disconnect(request, use_case.execute())
        return write_json(HTTPStatus.OK, MovieListEnvelope(movies=movies))
    except ClientDisconnectedError:
        return client_closed_response(logger, request)
    except (RepositoryError, EnvelopeEncodeError) as e:
        return server_error_response(logger, request, e)


@router.get("/{movie_id}")
async def read_movie(movie_id: str, request: Request, movie_repository: MovieRepositoryDep, logger: LoggerDep):
    try:
        movie_id_value = read_id_param(movie_id)
    except ValueError:
        return not_found_response(logger, request)

    try:
        use_case = GetMovieUseCase(movie_repository)
        movie = await cancel_on_disconnect(request, use_case.execute(movie_id_value))
        return write_json(HTTPStatus.OK, MovieEnvelope(movie=movie))
    except NotFoundError:
        return not_found_response(logger, request)
    except ClientDisconnectedError:
        return client_closed_response(logger, request)
    except (RepositoryError, EnvelopeEncodeError) as e:
        return server_error_response(logger, request, e)


@router.put("/{movie_id}")
@router.patch("/{movie_id}")
async def update_movie(
    movie_id: str,
    request: Request,
    movie_repository: MovieRepositoryDep,
    logger: LoggerDep,
    settings: SettingsDep,
    expected_version: Annotated[Optional[str], Header(alias="X-Expected-Version")] = None,
):
    try:
        movie_id_value = read_id_param(movie_id)
    except ValueError:
        return not_found_response(logger, request)

    try:
        movie_data = await read_json(request, MovieInput, settings.MAX_BODY_BYTES)
        use_case = UpdateMovieUseCase(movie_repository)
        movie = await cancel_on_disconnect(request, use_case.execute(movie_id_value, movie_data, expected_version))
        return write_json(HTTPStatus.OK, MovieEnvelope(movie=movie))
    except BodyDecodeError as e:
        return bad_request_response(logger, request, e)
    except NotFoundError:
        return not_found_response(logger, request)
    except FailedValidationError as e:
        return failed_validation_response(logger, request, e.errors)
    except EditConflictError:
        return edit_conflict_response(logger, request)
    except ClientDisconnectedError:
        return client_closed_response(logger, request)
    except (RepositoryError, EnvelopeEncodeError) as e:
        return server_error_response(logger, request, e)


@router.delete("/{movie_id}")
async def delete_movie(movie_id: str, request: Request, movie_repository: MovieRepositoryDep, logger: LoggerDep):
    try:
        movie_id_value = read_id_param(movie_id)
    except ValueError:
        return not_found_response(logger, request)

    try:
        use_case = DeleteMovieUseCase(movie_repository)
        message = await cancel_on_disconnect(request, use_case.execute(movie_id_value))
        return write_json(HTTPStatus.OK, message)
    except NotFoundError:
        return not_found_response(logger, request)
    except ClientDisconnectedError:
        return client_closed_response(logger, request)
    except (RepositoryError, EnvelopeEncodeError) as e:
        return server_error_response(logger, request, e)
