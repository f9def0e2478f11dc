from typing import Dict


class DomainError(Exception):
    pass


class FailedValidationError(DomainError):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("failed validation")
        self.errors = dict(errors)


class NotFoundError(DomainError):
    def __init__(self, message: str = "record not found"):
        super().__init__(message)


class EditConflictError(DomainError):
    def __init__(self, message: str = "edit conflict"):
        super().__init__(message)


class RepositoryError(DomainError):
    pass


class StoreTimeoutError(RepositoryError):
    def __init__(self, timeout: float):
        super().__init__(f"store call exceeded its {timeout:g}s deadline")
        self.timeout = timeout
