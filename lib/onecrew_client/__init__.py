from .client import OneCrewApi
from .config_types import ClientConfig, RequestSpec
from .errors import (
    ApiError,
    AuthError,
    AuthNetworkError,
    EnvelopeError,
    ErrorKind,
    ForbiddenError,
    GenericError,
    HttpError,
    NetworkError,
    OneCrewError,
    RequestTimeoutError,
    SessionExpiredError,
)
from .session import Session, SessionManager
from .storage import MemoryStore, SecureStore
from .transport import ApiClient

__all__ = [
    "OneCrewApi",
    "ApiClient",
    "SessionManager",
    "Session",
    "ClientConfig",
    "RequestSpec",
    "SecureStore",
    "MemoryStore",
    "OneCrewError",
    "ApiError",
    "ErrorKind",
    "RequestTimeoutError",
    "NetworkError",
    "HttpError",
    "GenericError",
    "EnvelopeError",
    "AuthError",
    "SessionExpiredError",
    "ForbiddenError",
    "AuthNetworkError",
]
