"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime

from skillswap.domain.errors import ValidationError


def now_iso() -> str:
    """Current UTC time as ISO 8601 with microseconds (swap and user timestamps)."""
    return datetime.now(UTC).isoformat(timespec="microseconds")


def require_text(value: str | None, field: str) -> str:
    """Strip *value*, returning it only if something is left.

    Examples:
        >>> require_text("  guitar ", "skill")
        'guitar'
    """
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} must not be empty", field=field)
    return cleaned
