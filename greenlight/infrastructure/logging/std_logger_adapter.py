import logging
from typing import Any, Optional

from greenlight.domain.ports.services.logger import LoggerPort


def format_attrs(msg: str, attrs: dict) -> str:
    if not attrs:
        return msg
    pairs = " ".join(f"{key}={value}" for key, value in attrs.items())
    return f"{msg} {pairs}"


class StdLoggerAdapter(LoggerPort):
    def __init__(self, name: Optional[str] = None):
        self._logger = logging.getLogger(name)

    def debug(self, msg: str, **attrs: Any) -> None:
        self._logger.debug(format_attrs(msg, attrs))

    def info(self, msg: str, **attrs: Any) -> None:
        self._logger.info(format_attrs(msg, attrs))

    def warning(self, msg: str, **attrs: Any) -> None:
        self._logger.warning(format_attrs(msg, attrs))

    def error(self, msg: str, **attrs: Any) -> None:
        self._logger.error(format_attrs(msg, attrs))

    def exception(self, msg: str, **attrs: Any) -> None:
        self._logger.exception(format_attrs(msg, attrs))
