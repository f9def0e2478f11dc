from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """Leveled logger taking structured key/value attributes, e.g. ``error(msg, method="GET")``."""

    @abstractmethod
    def debug(self, msg: str, **attrs: Any) -> None:
        pass

    @abstractmethod
    def info(self, msg: str, **attrs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, msg: str, **attrs: Any) -> None:
        pass

    @abstractmethod
    def error(self, msg: str, **attrs: Any) -> None:
        pass

    @abstractmethod
    def exception(self, msg: str, **attrs: Any) -> None:
        pass
