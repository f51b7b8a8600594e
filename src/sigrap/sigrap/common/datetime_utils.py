from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_datetime(value: Optional[str], field_name: str) -> datetime:
    """Parse an ISO-8601 datetime such as ``2025-05-01T08:30:00``."""
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO datetime (YYYY-MM-DDTHH:MM:SS)")


def format_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
