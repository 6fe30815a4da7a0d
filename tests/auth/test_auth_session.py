import unittest
from datetime import timedelta

import jwt

from drivemirror.auth import SessionSigner, bearer_token, is_allowed_domain
from drivemirror.errors import InvalidArgumentError, SessionError
from drivemirror.util.time import now_utc

USER = {
    "id": "u1",
    "email": "alice@example.com",
    "name": "Alice",
    "picture": "https://example.com/a.png",
    "locale": "en",
}


class TestSessionSigner(unittest.TestCase):
    def test_mint_and_verify(self) -> None:
        signer = SessionSigner("secret")
        claims = signer.verify(signer.mint(USER))
        self.assertEqual(
            claims,
            {
                "id": "u1",
                "email": "alice@example.com",
                "name": "Alice",
                "picture": "https://example.com/a.png",
            },
        )

    def test_token_expires_after_ttl(self) -> None:
        token = SessionSigner("secret").mint(USER)
        payload = jwt.decode(token, "secret", algorithms=["HS256"])
        self.assertEqual(payload["exp"] - payload["iat"], 24 * 3600)

    def test_expired_token(self) -> None:
        past = now_utc() - timedelta(hours=2)
        token = jwt.encode(
            {"email": "alice@example.com", "iat": past, "exp": past + timedelta(hours=1)},
            "secret",
            algorithm="HS256",
        )
        with self.assertRaises(SessionError):
            SessionSigner("secret").verify(token)

    def test_wrong_secret(self) -> None:
        token = SessionSigner("secret").mint(USER)
        with self.assertRaises(SessionError):
            SessionSigner("other").verify(token)

    def test_token_without_email(self) -> None:
        issued = now_utc()
        token = jwt.encode(
            {"id": "u1", "iat": issued, "exp": issued + timedelta(hours=1)},
            "secret",
            algorithm="HS256",
        )
        with self.assertRaises(SessionError):
            SessionSigner("secret").verify(token)

    def test_invalid_construction_and_input(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            SessionSigner("")
        with self.assertRaises(InvalidArgumentError):
            SessionSigner("secret", ttl=timedelta(0))
        with self.assertRaises(InvalidArgumentError):
            SessionSigner("secret").mint({"name": "no email"})
        with self.assertRaises(SessionError):
            SessionSigner("secret").verify("")


class TestSessionHelpers(unittest.TestCase):
    def test_bearer_token(self) -> None:
        self.assertEqual(bearer_token("Bearer abc"), "abc")
        self.assertEqual(bearer_token("bearer  abc "), "abc")
        for bad in (None, "", "Basic abc", "Bearer "):
            with self.assertRaises(SessionError):
                bearer_token(bad)

    def test_is_allowed_domain(self) -> None:
        self.assertTrue(is_allowed_domain("a@anything.org", []))
        self.assertTrue(is_allowed_domain("a@Example.com", ["example.com"]))
        self.assertFalse(is_allowed_domain("a@evil.com", ["example.com"]))
        self.assertFalse(is_allowed_domain("no-at-sign", ["example.com"]))


if __name__ == "__main__":
    unittest.main()
