import unittest

from drivemirror.errors.exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    DriveMirrorError,
    HttpErrorInfo,
    InvalidArgumentError,
    MirrorDivergenceError,
    MirrorError,
    MirrorWriteError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    RateLimitError,
    RemoteTimeoutError,
    RemoteUnavailableError,
    SessionError,
    map_http_error,
)


class TestExceptions(unittest.TestCase):
    def test_base_error_keeps_details_and_cause(self) -> None:
        cause = RuntimeError("root")
        err = DriveMirrorError("msg", details={"k": "v"}, cause=cause)
        self.assertEqual(str(err), "msg")
        self.assertEqual(err.details["k"], "v")
        self.assertIs(err.cause, cause)

    def test_details_default_to_empty_dict(self) -> None:
        err = DriveMirrorError("msg")
        self.assertEqual(err.details, {})
        self.assertIsNone(err.cause)

    def test_hierarchy(self) -> None:
        self.assertTrue(issubclass(RemoteTimeoutError, RemoteUnavailableError))
        self.assertTrue(issubclass(RateLimitError, RemoteUnavailableError))
        self.assertTrue(issubclass(MirrorWriteError, MirrorError))
        self.assertTrue(issubclass(MirrorDivergenceError, MirrorError))
        self.assertTrue(issubclass(SessionError, AuthError))

    def test_divergence_error_carries_result(self) -> None:
        marker = object()
        err = MirrorDivergenceError("diverged", result=marker, details={"id": "D1"})
        self.assertIs(err.result, marker)
        self.assertEqual(err.details["id"], "D1")

    def test_map_http_error_basic(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=404, message="not found"))
        self.assertIsInstance(err, NotFoundError)

        err = map_http_error(HttpErrorInfo(status_code=400, message="bad req"))
        self.assertIsInstance(err, InvalidArgumentError)

        err = map_http_error(HttpErrorInfo(status_code=429, message="rate"))
        self.assertIsInstance(err, RateLimitError)

        err = map_http_error(HttpErrorInfo(status_code=409, message="conflict"))
        self.assertIsInstance(err, ConflictError)

        err = map_http_error(HttpErrorInfo(status_code=412, message="precondition"))
        self.assertIsInstance(err, ConflictError)

        err = map_http_error(HttpErrorInfo(status_code=401, message="auth"))
        self.assertIsInstance(err, AuthError)

    def test_map_http_error_403_quota_vs_permission(self) -> None:
        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="quotaExceeded", message="quota")
        )
        self.assertIsInstance(err, QuotaExceededError)

        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="insufficientPermissions", message="x")
        )
        self.assertIsInstance(err, PermissionDeniedError)

    def test_map_http_error_5xx_is_api_error(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=503, message="unavail"))
        self.assertIsInstance(err, ApiError)
        self.assertEqual(err.details["status_code"], 503)

    def test_map_http_error_default_message_and_cause(self) -> None:
        cause = ValueError("x")
        err = map_http_error(HttpErrorInfo(status_code=418), cause=cause)
        self.assertIsInstance(err, ApiError)
        self.assertEqual(str(err), "HTTP error 418")
        self.assertIs(err.cause, cause)


if __name__ == "__main__":
    unittest.main()
