import unittest
from datetime import datetime, timedelta, timezone

from drivemirror.util.time import (
    coerce_datetime,
    normalize_dt,
    now_utc,
    parse_rfc3339,
    to_rfc3339,
)


class TestUtilTime(unittest.TestCase):
    def test_now_utc_is_tz_aware(self) -> None:
        dt = now_utc()
        self.assertIsNotNone(dt.tzinfo)
        self.assertEqual(dt.tzinfo, timezone.utc)

    def test_normalize_dt_rejects_naive(self) -> None:
        naive = datetime(2025, 1, 1, 12, 0, 0)
        with self.assertRaises(ValueError):
            normalize_dt(naive)

    def test_parse_rfc3339_z(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56Z")
        self.assertEqual(dt.tzinfo, timezone.utc)
        self.assertEqual(dt, datetime(2025, 1, 1, 12, 34, 56, tzinfo=timezone.utc))

    def test_parse_rfc3339_offset_converts_to_utc(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56+09:00")
        self.assertEqual(dt, datetime(2025, 1, 1, 3, 34, 56, tzinfo=timezone.utc))

    def test_to_rfc3339_outputs_z(self) -> None:
        dt = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        self.assertTrue(to_rfc3339(dt).endswith("Z"))

    def test_coerce_datetime_accepts_strings_and_datetimes(self) -> None:
        expected = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        self.assertEqual(coerce_datetime("2025-01-01T00:00:00Z"), expected)

        jst = timezone(timedelta(hours=9))
        self.assertEqual(coerce_datetime(datetime(2025, 1, 1, 9, 0, 0, tzinfo=jst)), expected)

        naive = coerce_datetime(datetime(2025, 1, 1, 0, 0, 0))
        self.assertEqual(naive, expected)

    def test_coerce_datetime_unknown_is_none(self) -> None:
        self.assertIsNone(coerce_datetime(None))
        self.assertIsNone(coerce_datetime(""))
        self.assertIsNone(coerce_datetime("not a date"))
        self.assertIsNone(coerce_datetime(12345))


if __name__ == "__main__":
    unittest.main()
