from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    CONFLICT = "CONFLICT"
    GENERIC = "GENERIC"


class StorageError(Exception):
    kind = ErrorKind.GENERIC

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(StorageError):
    kind = ErrorKind.NOT_FOUND


class DirectoryNotEmptyError(StorageError):
    kind = ErrorKind.CONFLICT


class DirectoryExistsError(StorageError):
    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, message: str = "Directory already exists", status_code: int | None = 400):
        super().__init__(message, status_code)


class ConfigurationError(RuntimeError):
    pass


class UnsupportedOperationError(NotImplementedError):
    pass


class TimestampParseError(ValueError):
    pass


class PathTraversalError(ValueError):
    pass


def classify_error(error: Exception) -> ErrorKind:
    if isinstance(error, StorageError):
        return error.kind
    return ErrorKind.GENERIC


def error_for_status(status_code: int | None, message: str, on_bad_request: type[StorageError] = StorageError) -> StorageError:
    """Map an HTTP status from the storage API onto the matching storage error."""
    if status_code == 404:
        return NotFoundError(message, status_code)
    if status_code == 400:
        return on_bad_request(message, status_code)
    return StorageError(message, status_code)
