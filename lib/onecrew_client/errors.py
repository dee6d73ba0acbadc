from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP = "http"
    GENERIC = "generic"
    SESSION_EXPIRED = "session_expired"
    FORBIDDEN = "forbidden"


class OneCrewError(Exception):
    """Base client error."""


class ApiError(OneCrewError):
    """Normalized failure returned to every caller of the request pipeline."""

    kind = ErrorKind.GENERIC

    def __init__(
            self,
            message: str,
            status_code: int | None = None,
            code: str | None = None,
            details: object | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    @property
    def retryable(self) -> bool:
        if self.kind is ErrorKind.TIMEOUT:
            return True
        return self.kind is ErrorKind.HTTP and (self.status_code or 0) >= 500

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status_code={self.status_code!r}, code={self.code!r})"


class RequestTimeoutError(ApiError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str = "Request timeout"):
        super().__init__(message, 408)


class NetworkError(ApiError):
    """Transport/network layer error."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str = "Network error - please check your connection"):
        super().__init__(message, 0)


class HttpError(ApiError):
    kind = ErrorKind.HTTP


class GenericError(ApiError):
    def __init__(self, message: str = "Unknown error occurred"):
        super().__init__(message, 500)


class EnvelopeError(ApiError):
    """The server answered 2xx but the envelope reported a failure."""

    kind = ErrorKind.HTTP


class AuthError(ApiError):
    """Auth-related classification produced by the session manager."""


class SessionExpiredError(AuthError):
    kind = ErrorKind.SESSION_EXPIRED

    def __init__(self, message: str = "Session expired. Please login again."):
        super().__init__(message, 401)


class ForbiddenError(AuthError):
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "You do not have permission to perform this action."):
        super().__init__(message, 403)


class AuthNetworkError(AuthError):
    kind = ErrorKind.NETWORK

    def __init__(self, message: str = "Network error. Please check your connection."):
        super().__init__(message, 0)
