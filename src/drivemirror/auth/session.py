"""Signed session tokens and sign-in domain policy."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Mapping, Optional, Sequence

import jwt

from drivemirror.errors import InvalidArgumentError, SessionError
from drivemirror.util.time import now_utc

SESSION_CLAIMS: tuple[str, ...] = ("id", "email", "name", "picture")


class SessionSigner:
    """Mint and verify HS256 session tokens carrying the signed-in user."""

    ALGORITHM = "HS256"

    def __init__(self, secret: str, *, ttl: timedelta = timedelta(hours=24)) -> None:
        if not isinstance(secret, str) or not secret:
            raise InvalidArgumentError("session secret must be a non-empty string")
        if ttl <= timedelta(0):
            raise InvalidArgumentError("session ttl must be positive")
        self._secret = secret
        self._ttl = ttl

    def mint(self, user: Mapping[str, Any]) -> str:
        """Sign {id, email, name, picture} from a user-info mapping."""
        if not user.get("email"):
            raise InvalidArgumentError("user info must include an email")

        issued = now_utc()
        payload: dict[str, Any] = {key: user.get(key) for key in SESSION_CLAIMS}
        payload["iat"] = issued
        payload["exp"] = issued + self._ttl
        return jwt.encode(payload, self._secret, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> dict[str, Any]:
        """Return the user claims, or raise SessionError."""
        if not token:
            raise SessionError("Missing session token")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise SessionError("Session token expired", cause=exc) from exc
        except jwt.InvalidTokenError as exc:
            raise SessionError("Invalid session token", cause=exc) from exc

        if not payload.get("email"):
            raise SessionError("Session token has no email claim")
        return {key: payload.get(key) for key in SESSION_CLAIMS}


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an 'Authorization: Bearer <token>' header value."""
    if not authorization:
        raise SessionError("Missing Authorization header")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise SessionError("Authorization header must be 'Bearer <token>'")
    return token.strip()


def is_allowed_domain(email: str, allowed_domains: Sequence[str]) -> bool:
    """An empty allow-list admits everyone; otherwise the email domain must match."""
    domains = {d.strip().lower() for d in allowed_domains if d and d.strip()}
    if not domains:
        return True
    _, sep, domain = email.rpartition("@")
    if not sep:
        return False
    return domain.lower() in domains
