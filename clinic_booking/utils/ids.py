"""Identifier helpers."""

from uuid import UUID


def is_valid_id(value: object) -> bool:
    """Check that ``value`` is a UUID string as used for record IDs."""
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True
