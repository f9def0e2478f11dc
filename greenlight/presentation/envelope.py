"""JSON envelope codec.

``write_json`` serializes one of the envelope models into an indented response body.
``read_json`` decodes a request body into a strict pydantic model and turns every way
the client can get it wrong into a ``BodyDecodeError`` subclass with a message the client
can act on. Anything that is the caller's fault rather than the client's is raised as a
different exception so it ends up as a 500.
"""

import inspect
import re
from typing import Any, Mapping, Optional, Sequence, Type, TypeVar

from fastapi import Request, Response
from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

from greenlight.applications.interfaces.dtos.envelope import Envelope

DEFAULT_MAX_BYTES = 1_048_576

M = TypeVar("M", bound=BaseModel)

_JSON_POSITION_RX = re.compile(r"at line (\d+) column (\d+)")
_TYPE_ERROR_SUFFIXES = ("_type", "_parsing", "_from_float")
_RANGE_ERRORS = {"greater_than", "greater_than_equal", "less_than", "less_than_equal"}


class EnvelopeEncodeError(Exception):
    pass


class InvalidDecodeTargetError(TypeError):
    def __init__(self, destination: Any):
        super().__init__(f"read_json destination must be a pydantic model class, got {destination!r}")
        self.destination = destination


class BodyDecodeError(ValueError):
    """Base class for request bodies the client has to fix."""


class MalformedJSONError(BodyDecodeError):
    """``offset`` is a byte offset into the body, counting the offending byte."""

    def __init__(self, offset: Optional[int] = None):
        self.offset = offset
        if offset is None:
            super().__init__("body contains badly formatted JSON")
        else:
            super().__init__(f"body contains badly formatted JSON (at character {offset})")


class TypeMismatchError(BodyDecodeError):
    def __init__(self, field: Optional[str] = None, offset: Optional[int] = None):
        self.field = field
        self.offset = offset
        if field:
            super().__init__(f'body contains incorrect JSON type for field "{field}"')
        else:
            super().__init__(f"body contains incorrect JSON type (at character {offset})")


class EmptyBodyError(BodyDecodeError):
    def __init__(self):
        super().__init__("body must not be empty")


class UnknownFieldError(BodyDecodeError):
    def __init__(self, name: str):
        super().__init__(f'body contains unknown key "{name}"')
        self.name = name


class BodyTooLargeError(BodyDecodeError):
    def __init__(self, limit: int):
        super().__init__(f"body must not be longer than {limit} bytes")
        self.limit = limit


class MultipleValuesError(BodyDecodeError):
    def __init__(self):
        super().__init__("body must contain a single JSON value")


def write_json(status: int, payload: Envelope, headers: Optional[Mapping[str, str]] = None) -> Response:
    try:
        body = payload.model_dump_json(indent=4).encode("utf-8") + b"\n"
    except PydanticSerializationError as e:
        raise EnvelopeEncodeError(str(e)) from e

    response = Response(content=body, status_code=status)
    for key, value in (headers or {}).items():
        response.headers[key] = value
    response.headers["Content-Type"] = "application/json"
    return response


def _check_destination(destination: Any) -> None:
    if not (inspect.isclass(destination) and issubclass(destination, BaseModel)):
        raise InvalidDecodeTargetError(destination)


async def read_body(request: Request, max_bytes: int = DEFAULT_MAX_BYTES) -> bytes:
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise BodyTooLargeError(max_bytes)
    return bytes(body)


async def read_json(request: Request, destination: Type[M], max_bytes: int = DEFAULT_MAX_BYTES) -> M:
    _check_destination(destination)

    body = await read_body(request, max_bytes)
    return decode_json(body, destination)


def decode_json(body: bytes, destination: Type[M]) -> M:
    _check_destination(destination)

    if not body.strip():
        raise EmptyBodyError()

    try:
        return destination.model_validate_json(body)
    except ValidationError as e:
        raise _triage(e, body) from e


def _triage(exc: ValidationError, body: bytes) -> BodyDecodeError:
    errors = exc.errors(include_url=False)
    if not errors:
        return BodyDecodeError(str(exc))

    # One problem is reported: syntax, then type, then unknown key, then anything else.
    for error in errors:
        if error["type"] == "json_invalid":
            detail = (error.get("ctx") or {}).get("error") or error.get("msg", "").removeprefix("Invalid JSON: ")
            return _syntax_error(detail, body)

    for error in errors:
        if _is_type_error(error["type"]):
            field = _field_name(error.get("loc", ()))
            if field:
                return TypeMismatchError(field=field)
            return TypeMismatchError(offset=len(body.rstrip()))

    for error in errors:
        if error["type"] == "extra_forbidden":
            loc = error.get("loc", ())
            return UnknownFieldError(str(loc[-1]) if loc else "")

    return BodyDecodeError(errors[0].get("msg", str(exc)))


def _is_type_error(error_type: str) -> bool:
    return error_type.endswith(_TYPE_ERROR_SUFFIXES) or error_type in _RANGE_ERRORS


def _syntax_error(detail: str, body: bytes) -> BodyDecodeError:
    if detail.startswith("EOF while parsing"):
        return MalformedJSONError()
    if detail.startswith("trailing characters"):
        return MultipleValuesError()

    match = _JSON_POSITION_RX.search(detail)
    if match is None:
        return MalformedJSONError()
    return MalformedJSONError(offset=_offset(body, int(match.group(1)), int(match.group(2))))


def _offset(body: bytes, line: int, column: int) -> int:
    # pydantic reports 1-based byte columns, so the result counts bytes up to and
    # including the offending one.
    lines = body.split(b"\n")
    return sum(len(previous) + 1 for previous in lines[: line - 1]) + column


def _field_name(loc: Sequence[Any]) -> str:
    return ".".join(str(part) for part in loc if not isinstance(part, int))
