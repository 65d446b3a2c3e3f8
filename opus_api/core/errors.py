from contextlib import contextmanager
from typing import Iterator


class ConfigError(RuntimeError):
    """Required configuration is missing or invalid."""


class StoreError(Exception):
    """Raised by a data store gateway when an operation fails."""


class ApiError(Exception):
    """
    Error surfaced to HTTP callers as {"error": {"message", "status"}}.
    """

    status: int = 500

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class RequestShapeError(ApiError):
    status = 400


class DomainValidationError(ApiError):
    status = 400


class UnauthorizedError(ApiError):
    status = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class StoreOperationError(ApiError):
    status = 500


@contextmanager
def store_errors(context: str) -> Iterator[None]:
    """
    Convert StoreError raised inside the block into a 500 StoreOperationError
    whose message is "<context>: <store message>".

    Example:
      with store_errors("Failed to fetch weights"):
          rows = store.list_weights(style_id)
    """
    try:
        yield
    except StoreError as e:
        raise StoreOperationError(f"{context}: {e}") from e
