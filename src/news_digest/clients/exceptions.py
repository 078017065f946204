"""Custom exceptions for site clients."""


class ClientError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConnectionError(ClientError):
    """Raised when the site cannot be reached after all retries."""

    pass


class APIError(ClientError):
    """Raised when the site answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, *args, **kwargs):
        self.status_code = status_code
        super().__init__(message, *args, **kwargs)


class NotFoundError(APIError):
    """Raised for 404 responses, e.g. an unpublished article body."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ValidationError(ClientError):
    """Raised when a response body is not in the expected shape."""

    def __init__(self, message: str, errors: list | None = None, *args, **kwargs):
        self.errors = errors or []
        super().__init__(message, *args, **kwargs)
