from __future__ import annotations

import uuid


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_request_id() -> str:
    """
    Generate a requestId for drives.create.

    Drive treats a repeated requestId as the same creation, so retries of a
    timed-out create never produce a second shared drive.
    """
    return f"create-{new_uuid()}"
