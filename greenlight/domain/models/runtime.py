import re
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import PydanticCustomError, core_schema

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_RUNTIME_RX = re.compile(r"([+-]?[0-9]+) mins")


class InvalidRuntimeFormatError(ValueError):
    def __init__(self, value: Any = None):
        super().__init__("invalid runtime format")
        self.value = value


class Runtime(int):
    """Movie runtime in minutes, written on the wire as ``"<n> mins"``."""

    def __repr__(self) -> str:
        return f"Runtime({int(self)})"

    def to_json(self) -> str:
        return f"{int(self)} mins"

    @classmethod
    def parse(cls, value: Any) -> "Runtime":
        if not isinstance(value, str):
            raise InvalidRuntimeFormatError(value)

        match = _RUNTIME_RX.fullmatch(value)
        if match is None:
            raise InvalidRuntimeFormatError(value)

        minutes = int(match.group(1))
        if not INT32_MIN <= minutes <= INT32_MAX:
            raise InvalidRuntimeFormatError(value)

        return cls(minutes)

    @classmethod
    def _validate_json(cls, value: Any) -> "Runtime":
        try:
            return cls.parse(value)
        except InvalidRuntimeFormatError:
            raise PydanticCustomError("invalid_runtime_format", "invalid runtime format")

    @classmethod
    def _validate_python(cls, value: Any) -> "Runtime":
        if isinstance(value, bool):
            raise PydanticCustomError("invalid_runtime_format", "invalid runtime format")
        if isinstance(value, int):
            return cls(value)
        return cls._validate_json(value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.json_or_python_schema(
            json_schema=core_schema.no_info_plain_validator_function(cls._validate_json),
            python_schema=core_schema.no_info_plain_validator_function(cls._validate_python),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: Runtime(value).to_json(), when_used="json"
            ),
        )
