import unittest

from drivemirror.auth import AuthInfo


class TestAuthInfo(unittest.TestCase):
    def test_auth_info_valid_oauth(self) -> None:
        info = AuthInfo(
            kind="oauth",
            data={
                "client_secrets_file": "/tmp/client_secrets.json",
                "token_file": "/tmp/token.json",
            },
        )
        self.assertEqual(info.kind, "oauth")
        self.assertEqual(info.token_file, "/tmp/token.json")

    def test_auth_info_service_account_with_subject(self) -> None:
        info = AuthInfo(
            kind="service_account",
            data={"service_account_file": "/tmp/sa.json", "subject": "admin@x.com"},
        )
        self.assertEqual(info.service_account_file, "/tmp/sa.json")
        self.assertEqual(info.subject, "admin@x.com")

    def test_subject_is_optional(self) -> None:
        info = AuthInfo(kind="service_account", data={"service_account_file": "/tmp/sa.json"})
        self.assertIsNone(info.subject)

    def test_auth_info_invalid_kind(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="api_key", data={})

    def test_auth_info_missing_keys(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="service_account", data={})
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={"client_secrets_file": "x"})

    def test_auth_info_data_must_be_dict(self) -> None:
        with self.assertRaises(TypeError):
            AuthInfo(kind="oauth", data=[("token_file", "x")])


if __name__ == "__main__":
    unittest.main()
