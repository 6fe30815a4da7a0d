"""Google credentials and client construction for drivemirror."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Sequence

from drivemirror.errors import AuthError, InvalidArgumentError

from .auth_info import AuthInfo

logger = logging.getLogger(__name__)

DRIVE_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)
FIRESTORE_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/datastore",)


class GoogleCredentials:
    """Load Google credentials and build the Drive and Firestore clients."""

    def __init__(self, auth_info: AuthInfo) -> None:
        self._auth_info = auth_info

    @property
    def auth_info(self) -> AuthInfo:
        return self._auth_info

    def get_credentials(self, scopes: Sequence[str], ensure_valid: bool = True):
        """
        Return credentials for the given scopes.

        Raises:
            AuthError: on load/refresh/flow failures.
            InvalidArgumentError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

        if self._auth_info.kind == "service_account":
            return self._service_account_credentials(scopes)
        return self._oauth_credentials(scopes, ensure_valid=ensure_valid)

    def build_drive_service(self, scopes: Optional[Sequence[str]] = None):
        """Build a Drive v3 service resource."""
        try:
            from googleapiclient.discovery import build
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                details={"hint": "Install google-api-python-client"},
                cause=exc,
            ) from exc

        creds = self.get_credentials(scopes or DRIVE_SCOPES)
        try:
            return build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

    def build_firestore_client(
        self,
        *,
        project_id: Optional[str] = None,
        database_id: str = "(default)",
    ) -> Any:
        """Build a Firestore client on the same identity (without impersonation)."""
        try:
            from google.cloud import firestore
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-cloud-firestore is not available",
                details={"hint": "Install google-cloud-firestore"},
                cause=exc,
            ) from exc

        if self._auth_info.kind == "service_account":
            creds = self._service_account_credentials(FIRESTORE_SCOPES, impersonate=False)
            project = project_id or getattr(creds, "project_id", None)
        else:
            creds = self.get_credentials(FIRESTORE_SCOPES)
            project = project_id

        try:
            return firestore.Client(project=project, credentials=creds, database=database_id)
        except Exception as exc:
            raise AuthError(
                "Failed to build Firestore client",
                details={"project_id": project, "database_id": database_id},
                cause=exc,
            ) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _service_account_credentials(
        self,
        scopes: Sequence[str],
        *,
        impersonate: bool = True,
    ):
        try:
            from google.oauth2 import service_account
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth"},
                cause=exc,
            ) from exc

        path = self._auth_info.service_account_file
        delegate = self._auth_info.subject if impersonate else None
        try:
            creds = service_account.Credentials.from_service_account_file(
                path,
                scopes=list(scopes),
            )
        except Exception as exc:
            raise AuthError(
                "Failed to load service account file",
                details={"service_account_file": path},
                cause=exc,
            ) from exc

        if delegate:
            logger.debug("Impersonating %s for Drive calls", delegate)
            creds = creds.with_subject(delegate)
        return creds

    def _oauth_credentials(self, scopes: Sequence[str], *, ensure_valid: bool):
        try:
            from google.auth.transport.requests import Request
            from google.oauth2.credentials import Credentials
            from google_auth_oauthlib.flow import InstalledAppFlow
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth and google-auth-oauthlib"},
                cause=exc,
            ) from exc

        token_file = self._auth_info.token_file
        creds = None

        if os.path.exists(token_file):
            try:
                creds = Credentials.from_authorized_user_file(
                    token_file,
                    scopes=list(scopes),
                )
            except Exception as exc:
                raise AuthError(
                    "Failed to load token_file",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc

            if not ensure_valid:
                return creds

            if not creds.valid and creds.refresh_token:
                try:
                    creds.refresh(Request())
                    self._save_credentials(creds)
                except Exception as exc:
                    raise AuthError(
                        "Failed to refresh OAuth credentials",
                        details={"token_file": token_file},
                        cause=exc,
                    ) from exc

            if creds.valid:
                return creds

        # No token, or token could not be refreshed -> run the consent flow.
        client_secrets = self._auth_info.client_secrets_file
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                client_secrets,
                scopes=list(scopes),
            )
            creds = flow.run_local_server(port=0)
            self._save_credentials(creds)
            return creds
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={
                    "client_secrets_file": client_secrets,
                    "token_file": token_file,
                },
                cause=exc,
            ) from exc

    def _save_credentials(self, creds) -> None:
        token_file = self._auth_info.token_file
        token_dir = os.path.dirname(token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except Exception as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
