"""Skill normalization and overlap scoring.

Pure functions. Skills are compared as lowercased, trimmed tokens; order
carries no meaning anywhere downstream.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from skillswap.domain.errors import ValidationError

MAX_SKILLS = 20


def normalize(skills: Iterable[str | None] | None) -> frozenset[str]:
    """Canonicalize free-text skill tokens.

    Drops falsy entries, trims whitespace, lowercases, and deduplicates.
    Performs no truncation.

    Examples:
        >>> sorted(normalize([" Python", "python ", "", None, "Guitar"]))
        ['guitar', 'python']
    """
    if not skills:
        return frozenset()
    cleaned = (s.strip().lower() for s in skills if s)
    return frozenset(s for s in cleaned if s)


def overlap(teach: Iterable[str] | None, learn: Iterable[str] | None) -> int:
    """Count skills present in both *teach* and *learn*.

    Re-lowercases both sides, so callers need not pre-normalize.
    Duplicates collapse before counting.
    """
    return len(normalize(teach) & normalize(learn))


def validate_skill_list(skills: object, *, max_entries: int = MAX_SKILLS) -> list[str]:
    """Check a raw skill list before normalization.

    Raises:
        ValidationError: If *skills* is not a list of strings or holds more
            than *max_entries* items.
    """
    if not isinstance(skills, (list, tuple)):
        raise ValidationError("Skills must be a list of strings")
    if len(skills) > max_entries:
        raise ValidationError(
            f"Keep skills to {max_entries} items",
            count=len(skills),
            max_entries=max_entries,
        )
    for skill in skills:
        if not isinstance(skill, str):
            raise ValidationError(f"Skill entries must be strings, got {type(skill).__name__}")
    return list(skills)


def to_storage(skills: Iterable[str]) -> str:
    """Serialize a normalized skill set as a sorted JSON array."""
    return json.dumps(sorted(skills))


def from_storage(raw: str | None) -> frozenset[str]:
    """Parse a stored JSON array back into a skill set."""
    if not raw:
        return frozenset()
    return normalize(json.loads(raw))
