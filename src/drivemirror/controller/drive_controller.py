"""Google Drive API controller (internal use only)."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from drivemirror.auth import GoogleCredentials
from drivemirror.errors import (
    ApiError,
    HttpErrorInfo,
    InvalidStateError,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from drivemirror.models import FOLDER_MIME, DriveRecord, RemoteItem
from drivemirror.util.ids import new_request_id
from drivemirror.util.time import coerce_datetime

from .fields import DRIVE_FIELDS, FOLDER_FIELDS, METADATA_FIELDS, PERMISSION_FIELDS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class GoogleDriveController:
    """
    Drive API controller (internal only).

    Notes:
        - The Drive `service` object is NOT exposed.
        - Every call is blocking; callers that need concurrency run it in a
          worker thread.
        - All requests set supportsAllDrives, since everything here lives in
          shared drives.
    """

    ORGANIZER_ROLE = "organizer"

    def __init__(self, credentials: GoogleCredentials) -> None:
        self._retry_policy = _RetryPolicy()
        self._service = credentials.build_drive_service()

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        retry_policy: Optional[_RetryPolicy] = None,
    ) -> "GoogleDriveController":
        """Create controller from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._retry_policy = retry_policy or _RetryPolicy()
        obj._service = service
        return obj

    # ----------------------------
    # Public API
    # ----------------------------
    def create_shared_drive(self, name: str, *, request_id: Optional[str] = None) -> DriveRecord:
        """
        Create a shared drive.

        The same requestId is reused across retries so Drive deduplicates them.
        """
        req = self._service.drives().create(
            requestId=request_id or new_request_id(),
            body={"name": name},
            fields=DRIVE_FIELDS,
        )
        data = self._execute(req.execute)
        drive = DriveRecord.from_api(data)
        if not drive.id:
            raise InvalidStateError("Drive did not return an id for the created shared drive")
        return drive

    def add_organizer(self, drive_id: str, email: str) -> str:
        """Grant the organizer (manager) role to a user. Returns the permission id."""
        req = self._service.permissions().create(
            fileId=drive_id,
            body={"role": self.ORGANIZER_ROLE, "type": "user", "emailAddress": email},
            fields=PERMISSION_FIELDS,
            supportsAllDrives=True,
        )
        data = self._execute(req.execute)
        permission_id = data.get("id")
        if not isinstance(permission_id, str) or not permission_id:
            raise InvalidStateError(
                "Drive did not return a permission id",
                details={"drive_id": drive_id, "email": email},
            )
        return permission_id

    def create_folder(
        self,
        name: str,
        drive_id: str,
        parent_id: Optional[str] = None,
    ) -> RemoteItem:
        """Create a folder under parent_id, or at the root of the shared drive."""
        body = {
            "name": name,
            "mimeType": FOLDER_MIME,
            "parents": [parent_id or drive_id],
            "driveId": drive_id,
        }
        req = self._service.files().create(
            body=body,
            fields=FOLDER_FIELDS,
            supportsAllDrives=True,
        )
        data = self._execute(req.execute)
        item = _item_dict_to_remote_item(data)
        if not item.file_id:
            raise InvalidStateError("Drive did not return an id for the created folder")
        return item

    def get_metadata(self, file_id: str) -> RemoteItem:
        """Read name and parents of a file or folder."""
        req = self._service.files().get(
            fileId=file_id,
            fields=METADATA_FIELDS,
            supportsAllDrives=True,
        )
        data = self._execute(req.execute)
        return _item_dict_to_remote_item(data)

    # ----------------------------
    # Internals
    # ----------------------------
    def _execute(self, func: Callable[[], T]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.debug(
                        "Retrying Drive call after %s (attempt %d)",
                        type(mapped).__name__,
                        attempt + 1,
                    )
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        try:
            from googleapiclient.errors import HttpError
        except Exception:  # pragma: no cover
            HttpError = None  # type: ignore[assignment]

        if HttpError is not None and isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def _item_dict_to_remote_item(data: dict[str, Any]) -> RemoteItem:
    file_id = data.get("id")
    name = data.get("name", "")
    mime_type = data.get("mimeType", "")
    parents = data.get("parents", []) or []

    return RemoteItem(
        file_id=file_id if isinstance(file_id, str) else "",
        name=name if isinstance(name, str) else "",
        mime_type=mime_type if isinstance(mime_type, str) else "",
        parents=list(parents) if isinstance(parents, list) else [],
        created_time=coerce_datetime(data.get("createdTime")),
    )


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
