"""Lightweight validation helpers for inbound request values."""

from typing import Any, Optional


def parse_positive_int(value: Any) -> Optional[int]:
    """Return ``value`` as a positive int, or None when it is not one."""
    if isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None
