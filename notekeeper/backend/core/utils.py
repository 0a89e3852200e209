"""
Core Utilities.

Timestamps and identifiers shared by models, services and health checks.
Stored datetimes are timezone-naive UTC.
"""

from datetime import datetime, timezone
from uuid import uuid4


def utc_now() -> datetime:
    """Current UTC time with tzinfo stripped."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    """Fresh random identifier in canonical UUID text form."""
    return str(uuid4())
