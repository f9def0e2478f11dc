import re
from typing import Dict, Hashable, Iterable, Pattern

EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


class Validator:
    """Collects one error message per field key.

    The first failing check for a key wins; later failures for the same key are ignored.
    """

    def __init__(self):
        self.errors: Dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        if key not in self.errors:
            self.errors[key] = message

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)


def permitted_value(value, *permitted_values) -> bool:
    return value in permitted_values


def matches(value: str, rx: Pattern[str]) -> bool:
    return rx.match(value) is not None


def unique(values: Iterable[Hashable]) -> bool:
    values = list(values)
    return len(set(values)) == len(values)
