"""Authentication information for drivemirror."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

_REQUIRED_KEYS: dict[str, tuple[str, ...]] = {
    "service_account": ("service_account_file",),
    "oauth": ("client_secrets_file", "token_file"),
}


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    Supported kinds:
        kind = "service_account"
            data must include service_account_file; optional subject is the
            Workspace user to impersonate (domain-wide delegation), needed to
            create shared drives on behalf of the organization.
        kind = "oauth"
            data must include client_secrets_file and token_file.
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind not in _REQUIRED_KEYS:
            raise ValueError("AuthInfo.kind must be 'service_account' or 'oauth'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in _REQUIRED_KEYS[self.kind]:
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @property
    def service_account_file(self) -> str:
        return str(self.data["service_account_file"])

    @property
    def subject(self) -> Optional[str]:
        value = self.data.get("subject")
        return str(value) if value else None

    @property
    def client_secrets_file(self) -> str:
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        return str(self.data["token_file"])
