"""Exception hierarchy and HTTP error mapping for drivemirror."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class DriveMirrorError(Exception):
    """
    Base exception for drivemirror.

    Attributes:
        details: Optional structured information (e.g., HTTP status, drive id).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ValidationError(DriveMirrorError):
    """Raised before any remote call when input is empty or malformed."""


class InvalidStateError(DriveMirrorError):
    """Raised when the provider answers in a way the library cannot use."""


class NameConflictError(DriveMirrorError):
    """Raised when two drive records bind to the same hierarchical path."""


class AuthError(DriveMirrorError):
    """Raised when credentials cannot be loaded, refreshed or accepted (HTTP 401)."""


class SessionError(AuthError):
    """Raised when a session token is expired, tampered with or incomplete."""


class PermissionDeniedError(DriveMirrorError):
    """Raised when the provider rejects the call on authorization (HTTP 403)."""


class InvalidArgumentError(DriveMirrorError):
    """Raised when the provider rejects request arguments (HTTP 400)."""


class NotFoundError(DriveMirrorError):
    """Raised when a referenced drive, folder or parent is absent (HTTP 404)."""


class ConflictError(DriveMirrorError):
    """Raised on provider-side conflicts (HTTP 409/412)."""


class RemoteUnavailableError(DriveMirrorError):
    """Raised when the provider call failed or did not answer in time."""


class RemoteTimeoutError(RemoteUnavailableError):
    """Raised when a provider call exceeds its time bound."""


class NetworkError(RemoteUnavailableError):
    """Raised when network issues prevent the request."""


class RateLimitError(RemoteUnavailableError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(RemoteUnavailableError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class ApiError(RemoteUnavailableError):
    """Raised for unclassified provider errors (5xx, unknown 4xx, etc.)."""


class MirrorError(DriveMirrorError):
    """Raised when the document store cannot be read."""


class MirrorWriteError(MirrorError):
    """Raised when a mirror write or batch commit fails."""


class MirrorDivergenceError(MirrorError):
    """
    Raised on request when a remote object exists but was not mirrored.

    Attributes:
        result: The creation result carrying the remote identifiers.
    """

    def __init__(
        self,
        message: str,
        *,
        result: Any = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, details=details, cause=cause)
        self.result = result


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to drivemirror exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> DriveMirrorError:
    """
    Map a provider HTTP error to a drivemirror exception.

    Policy:
        - 400 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> PermissionDeniedError, or QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - 5xx and anything else -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionDeniedError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
