"""Public error exports for drivemirror."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    DriveMirrorError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    MirrorDivergenceError,
    MirrorError,
    MirrorWriteError,
    NameConflictError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    RateLimitError,
    RemoteTimeoutError,
    RemoteUnavailableError,
    SessionError,
    ValidationError,
    map_http_error,
)

__all__ = [
    "DriveMirrorError",
    "ValidationError",
    "InvalidStateError",
    "NameConflictError",
    "AuthError",
    "SessionError",
    "PermissionDeniedError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "RemoteUnavailableError",
    "RemoteTimeoutError",
    "NetworkError",
    "RateLimitError",
    "QuotaExceededError",
    "ApiError",
    "MirrorError",
    "MirrorWriteError",
    "MirrorDivergenceError",
    "HttpErrorInfo",
    "map_http_error",
]
