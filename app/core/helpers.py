"""
Helper functions for common infrastructure operations.

User and group identifiers are UUIDs exposed as opaque strings ("friend
codes"). Clients paste them by hand, so parsing must never raise.

Usage:
    from core.helpers import parse_uuid

    user_id = parse_uuid(request.data.get("user_id"))
    if user_id is None:
        ...
"""

from __future__ import annotations

import uuid


def parse_uuid(value) -> uuid.UUID | None:
    """
    Parse a UUID from a string (surrounding whitespace ignored).

    Returns:
        UUID instance, or None for anything that is not a UUID
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        return None
