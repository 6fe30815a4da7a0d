import json
import unittest
from datetime import datetime, timezone
from unittest.mock import Mock, patch

from drivemirror.controller.drive_controller import (
    GoogleDriveController,
    _item_dict_to_remote_item,
)
from drivemirror.errors import InvalidArgumentError, InvalidStateError, NotFoundError, RateLimitError
from drivemirror.models import FOLDER_MIME


def _http_error(status: int, reason: str, body=None):
    from googleapiclient.errors import HttpError

    resp = Mock()
    resp.status = status
    resp.reason = reason
    content = json.dumps(body).encode("utf-8") if body is not None else b"{}"
    return HttpError(resp=resp, content=content)


class TestDriveControllerHelpers(unittest.TestCase):
    def test_item_dict_to_remote_item_parses_time(self) -> None:
        item = _item_dict_to_remote_item(
            {
                "id": "F1",
                "name": "Q1",
                "mimeType": FOLDER_MIME,
                "parents": ["P1"],
                "createdTime": "2025-01-01T00:00:00Z",
            }
        )
        self.assertEqual(item.file_id, "F1")
        self.assertEqual(item.parents, ["P1"])
        self.assertEqual(item.created_time, datetime(2025, 1, 1, tzinfo=timezone.utc))

    def test_item_dict_to_remote_item_tolerates_missing_fields(self) -> None:
        item = _item_dict_to_remote_item({"id": "F1", "parents": None})
        self.assertEqual(item.name, "")
        self.assertEqual(item.parents, [])
        self.assertIsNone(item.created_time)


class TestDriveControllerMocked(unittest.TestCase):
    def test_create_shared_drive_passes_request_id(self) -> None:
        service = Mock()
        service.drives.return_value.create.return_value.execute.return_value = {
            "id": "D1",
            "name": "Team X",
            "createdTime": "2025-01-01T00:00:00Z",
        }
        controller = GoogleDriveController.from_service(service)

        drive = controller.create_shared_drive("Team X", request_id="create-123")

        kwargs = service.drives.return_value.create.call_args.kwargs
        self.assertEqual(kwargs["requestId"], "create-123")
        self.assertEqual(kwargs["body"], {"name": "Team X"})
        self.assertEqual(drive.id, "D1")
        self.assertEqual(drive.name, "Team X")

    def test_create_shared_drive_without_id_is_invalid_state(self) -> None:
        service = Mock()
        service.drives.return_value.create.return_value.execute.return_value = {}
        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(InvalidStateError):
            controller.create_shared_drive("Team X")

    def test_add_organizer(self) -> None:
        service = Mock()
        permissions = service.permissions.return_value
        permissions.create.return_value.execute.return_value = {"id": "perm-1"}
        controller = GoogleDriveController.from_service(service)

        self.assertEqual(controller.add_organizer("D1", "a@x.com"), "perm-1")
        kwargs = permissions.create.call_args.kwargs
        self.assertEqual(kwargs["fileId"], "D1")
        self.assertEqual(
            kwargs["body"],
            {"role": "organizer", "type": "user", "emailAddress": "a@x.com"},
        )
        self.assertTrue(kwargs["supportsAllDrives"])

    def test_add_organizer_bad_email_is_not_retried(self) -> None:
        service = Mock()
        req = service.permissions.return_value.create.return_value
        req.execute.side_effect = _http_error(
            400,
            "Bad Request",
            {"error": {"message": "Invalid email", "errors": [{"reason": "invalid"}]}},
        )
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None) as sleep:
            with self.assertRaises(InvalidArgumentError) as ctx:
                controller.add_organizer("D1", "bad@@")

        self.assertEqual(str(ctx.exception), "Invalid email")
        self.assertEqual(req.execute.call_count, 1)
        sleep.assert_not_called()

    def test_create_folder_defaults_parent_to_drive_root(self) -> None:
        service = Mock()
        files_resource = service.files.return_value
        files_resource.create.return_value.execute.return_value = {
            "id": "F1",
            "name": "Reports",
            "mimeType": FOLDER_MIME,
            "parents": ["D1"],
        }
        controller = GoogleDriveController.from_service(service)

        item = controller.create_folder("Reports", "D1")

        kwargs = files_resource.create.call_args.kwargs
        self.assertEqual(kwargs["body"]["parents"], ["D1"])
        self.assertEqual(kwargs["body"]["mimeType"], FOLDER_MIME)
        self.assertTrue(kwargs["supportsAllDrives"])
        self.assertEqual(item.file_id, "F1")

        controller.create_folder("Q1", "D1", "F1")
        self.assertEqual(files_resource.create.call_args.kwargs["body"]["parents"], ["F1"])

    def test_get_metadata_maps_http_404_to_not_found(self) -> None:
        service = Mock()
        req = service.files.return_value.get.return_value
        req.execute.side_effect = _http_error(404, "Not Found")
        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(NotFoundError):
            controller.get_metadata("X")

    def test_retry_on_429(self) -> None:
        service = Mock()
        req = service.files.return_value.get.return_value
        http_err = _http_error(
            429,
            "rateLimitExceeded",
            {"error": {"message": "rate limited", "errors": [{"reason": "rateLimitExceeded"}]}},
        )

        # Fail twice, then succeed.
        req.execute.side_effect = [
            http_err,
            http_err,
            {"id": "F1", "name": "n", "parents": ["D1"]},
        ]
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None):
            item = controller.get_metadata("F1")

        self.assertEqual(item.file_id, "F1")
        self.assertEqual(req.execute.call_count, 3)

    def test_retries_are_bounded(self) -> None:
        service = Mock()
        req = service.files.return_value.get.return_value
        req.execute.side_effect = _http_error(429, "rateLimitExceeded")
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None):
            with self.assertRaises(RateLimitError):
                controller.get_metadata("F1")

        self.assertEqual(req.execute.call_count, 4)


if __name__ == "__main__":
    unittest.main()
