from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from drivemirror.auth import AuthInfo
from drivemirror.errors import InvalidArgumentError


class Settings(BaseSettings):
    """
    Deployment settings loaded from environment variables (and `.env`).

    Credentials: GOOGLE_SERVICE_ACCOUNT_FILE (with IMPERSONATE_USER_EMAIL for
    domain-wide delegation) is preferred; GOOGLE_CLIENT_SECRETS_FILE plus
    GOOGLE_TOKEN_FILE is the OAuth fallback.
    """

    GOOGLE_SERVICE_ACCOUNT_FILE: Optional[str] = None
    IMPERSONATE_USER_EMAIL: Optional[str] = None
    GOOGLE_CLIENT_SECRETS_FILE: Optional[str] = None
    GOOGLE_TOKEN_FILE: Optional[str] = None

    GCP_PROJECT_ID: Optional[str] = None
    FIRESTORE_DATABASE_ID: str = "(default)"

    JWT_SECRET: Optional[str] = None
    JWT_TTL_HOURS: float = Field(default=24.0, gt=0)
    # Comma separated, e.g. "example.com,example.org". Empty admits all.
    ALLOWED_DOMAINS: str = ""

    REMOTE_TIMEOUT_SEC: float = Field(default=30.0, gt=0)
    MAX_FOLDER_DEPTH: int = Field(default=32, ge=1)
    CONCURRENT_GRANTS: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_domains(self) -> list[str]:
        return [d.strip() for d in self.ALLOWED_DOMAINS.split(",") if d.strip()]

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.JWT_TTL_HOURS)

    def auth_info(self) -> AuthInfo:
        """Credential descriptor for the Drive and Firestore clients."""
        if self.GOOGLE_SERVICE_ACCOUNT_FILE:
            data = {"service_account_file": self.GOOGLE_SERVICE_ACCOUNT_FILE}
            if self.IMPERSONATE_USER_EMAIL:
                data["subject"] = self.IMPERSONATE_USER_EMAIL
            return AuthInfo(kind="service_account", data=data)

        if self.GOOGLE_CLIENT_SECRETS_FILE and self.GOOGLE_TOKEN_FILE:
            return AuthInfo(
                kind="oauth",
                data={
                    "client_secrets_file": self.GOOGLE_CLIENT_SECRETS_FILE,
                    "token_file": self.GOOGLE_TOKEN_FILE,
                },
            )

        raise InvalidArgumentError(
            "No Google credentials configured",
            details={
                "hint": "Set GOOGLE_SERVICE_ACCOUNT_FILE, or GOOGLE_CLIENT_SECRETS_FILE "
                "and GOOGLE_TOKEN_FILE",
            },
        )
