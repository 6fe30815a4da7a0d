"""Public auth exports for drivemirror."""

from __future__ import annotations

from .auth_info import AuthInfo
from .credentials import DRIVE_SCOPES, FIRESTORE_SCOPES, GoogleCredentials
from .session import SessionSigner, bearer_token, is_allowed_domain

__all__ = [
    "AuthInfo",
    "GoogleCredentials",
    "DRIVE_SCOPES",
    "FIRESTORE_SCOPES",
    "SessionSigner",
    "bearer_token",
    "is_allowed_domain",
]
