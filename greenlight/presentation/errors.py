"""Translate failures into JSON error envelopes.

Routers call these helpers; nothing below the presentation layer builds responses.
"""

from http import HTTPStatus
from typing import Dict, Optional

from fastapi import FastAPI, Request, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from greenlight.applications.interfaces.dtos.envelope import Envelope, ErrorEnvelope, ValidationErrorEnvelope
from greenlight.domain.ports.services.logger import LoggerPort
from greenlight.infrastructure.logging.std_logger_adapter import StdLoggerAdapter
from greenlight.presentation.envelope import EnvelopeEncodeError, write_json

NOT_FOUND_MESSAGE = "the requested resource could not be found"
EDIT_CONFLICT_MESSAGE = "unable to update the record due to an edit conflict, please try again"
SERVER_ERROR_MESSAGE = "the server encountered a problem and could not process your request"

CLIENT_CLOSED_REQUEST = 499


def log_error(logger: LoggerPort, request: Request, err: BaseException) -> None:
    logger.error(str(err) or type(err).__name__, method=request.method, uri=request.url.path)


def error_response(
    logger: LoggerPort,
    request: Request,
    status: int,
    payload: Envelope,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    try:
        return write_json(status, payload, headers)
    except EnvelopeEncodeError as e:
        log_error(logger, request, e)
        return Response(status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


def server_error_response(
    logger: LoggerPort, request: Request, err: BaseException, headers: Optional[Dict[str, str]] = None
) -> Response:
    logger.exception(str(err) or type(err).__name__, method=request.method, uri=request.url.path)
    return error_response(
        logger, request, HTTPStatus.INTERNAL_SERVER_ERROR, ErrorEnvelope(error=SERVER_ERROR_MESSAGE), headers
    )


def not_found_response(logger: LoggerPort, request: Request) -> Response:
    return error_response(logger, request, HTTPStatus.NOT_FOUND, ErrorEnvelope(error=NOT_FOUND_MESSAGE))


def method_not_allowed_response(
    logger: LoggerPort, request: Request, headers: Optional[Dict[str, str]] = None
) -> Response:
    message = f"the {request.method} method is not supported for this resource"
    return error_response(logger, request, HTTPStatus.METHOD_NOT_ALLOWED, ErrorEnvelope(error=message), headers)


def bad_request_response(logger: LoggerPort, request: Request, err: Exception) -> Response:
    return error_response(logger, request, HTTPStatus.BAD_REQUEST, ErrorEnvelope(error=str(err)))


def edit_conflict_response(logger: LoggerPort, request: Request) -> Response:
    return error_response(logger, request, HTTPStatus.CONFLICT, ErrorEnvelope(error=EDIT_CONFLICT_MESSAGE))


def failed_validation_response(logger: LoggerPort, request: Request, errors: Dict[str, str]) -> Response:
    return error_response(
        logger, request, HTTPStatus.UNPROCESSABLE_ENTITY, ValidationErrorEnvelope(error=errors)
    )


def client_closed_response(logger: LoggerPort, request: Request) -> Response:
    # Nobody is left to read a body.
    logger.info("client disconnected, request abandoned", method=request.method, uri=request.url.path)
    return Response(status_code=CLIENT_CLOSED_REQUEST)


def register_error_handlers(app: FastAPI) -> None:
    """Route-level 404/405 and crash recovery, all answered with the error envelope."""
    logger = StdLoggerAdapter("greenlight.api")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == HTTPStatus.NOT_FOUND:
            return not_found_response(logger, request)
        if exc.status_code == HTTPStatus.METHOD_NOT_ALLOWED:
            return method_not_allowed_response(logger, request, exc.headers)
        return error_response(logger, request, exc.status_code, ErrorEnvelope(error=str(exc.detail)), exc.headers)

    @app.exception_handler(Exception)
    async def recover_panic(request: Request, exc: Exception) -> Response:
        return server_error_response(logger, request, exc, headers={"Connection": "close"})
