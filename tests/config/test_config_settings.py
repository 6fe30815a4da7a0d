import os
import unittest
from datetime import timedelta
from unittest.mock import patch

from pydantic import ValidationError as PydanticValidationError

from drivemirror.config import Settings
from drivemirror.errors import InvalidArgumentError


class TestSettings(unittest.TestCase):
    def _settings(self, **env) -> Settings:
        with patch.dict(os.environ, env, clear=True):
            return Settings(_env_file=None)

    def test_defaults(self) -> None:
        settings = self._settings()
        self.assertEqual(settings.REMOTE_TIMEOUT_SEC, 30.0)
        self.assertEqual(settings.MAX_FOLDER_DEPTH, 32)
        self.assertTrue(settings.CONCURRENT_GRANTS)
        self.assertEqual(settings.FIRESTORE_DATABASE_ID, "(default)")
        self.assertEqual(settings.allowed_domains, [])
        self.assertEqual(settings.session_ttl, timedelta(hours=24))

    def test_env_overrides(self) -> None:
        settings = self._settings(
            ALLOWED_DOMAINS="example.com, example.org ,",
            REMOTE_TIMEOUT_SEC="5",
            CONCURRENT_GRANTS="false",
            JWT_TTL_HOURS="1",
        )
        self.assertEqual(settings.allowed_domains, ["example.com", "example.org"])
        self.assertEqual(settings.REMOTE_TIMEOUT_SEC, 5.0)
        self.assertFalse(settings.CONCURRENT_GRANTS)
        self.assertEqual(settings.session_ttl, timedelta(hours=1))

    def test_rejects_non_positive_timeout(self) -> None:
        with self.assertRaises(PydanticValidationError):
            self._settings(REMOTE_TIMEOUT_SEC="0")

    def test_auth_info_prefers_service_account(self) -> None:
        settings = self._settings(
            GOOGLE_SERVICE_ACCOUNT_FILE="/keys/sa.json",
            IMPERSONATE_USER_EMAIL="admin@example.com",
            GOOGLE_CLIENT_SECRETS_FILE="/keys/client.json",
            GOOGLE_TOKEN_FILE="/keys/token.json",
        )
        info = settings.auth_info()
        self.assertEqual(info.kind, "service_account")
        self.assertEqual(info.subject, "admin@example.com")

    def test_auth_info_oauth_fallback(self) -> None:
        settings = self._settings(
            GOOGLE_CLIENT_SECRETS_FILE="/keys/client.json",
            GOOGLE_TOKEN_FILE="/keys/token.json",
        )
        self.assertEqual(settings.auth_info().kind, "oauth")

    def test_auth_info_requires_credentials(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self._settings().auth_info()


if __name__ == "__main__":
    unittest.main()
