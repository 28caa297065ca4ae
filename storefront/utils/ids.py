"""Identifier parsing helpers."""

import uuid
from typing import Optional


def coerce_uuid(value) -> Optional[uuid.UUID]:
    """Return ``value`` as a UUID, or None when it is not one."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None
