from .ids import new_request_id, new_uuid
from .paths import PATH_SEPARATOR, UNKNOWN_PATH, escape_segment, join_full_path
from .time import coerce_datetime, normalize_dt, now_utc, parse_rfc3339, to_rfc3339

__all__ = [
    "new_uuid",
    "new_request_id",
    "PATH_SEPARATOR",
    "UNKNOWN_PATH",
    "escape_segment",
    "join_full_path",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
    "coerce_datetime",
]
