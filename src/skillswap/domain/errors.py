"""Typed domain failures.

Each error carries a stable ``code`` that the service layer copies into
``ServiceError.code``. Errors are local and never retried by the core.
"""

from __future__ import annotations

from typing import Any


class SkillSwapError(Exception):
    """Base class for all expected, caller-visible failures."""

    code = "SKILLSWAP_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class ValidationError(SkillSwapError):
    """Malformed input shape (blank name, out-of-range score, oversized list)."""

    code = "VALIDATION_FAILED"


class NotFoundError(SkillSwapError):
    """A referenced user or swap does not exist."""

    code = "NOT_FOUND"


class SelfReferenceError(SkillSwapError):
    """A swap was requested with the same user on both sides."""

    code = "SELF_REFERENCE"


class SelfRatingError(SkillSwapError):
    """A user tried to rate themselves."""

    code = "SELF_RATING"


class ForbiddenError(SkillSwapError):
    """The actor lacks the role required for the transition."""

    code = "FORBIDDEN"


class InvalidStateError(SkillSwapError):
    """The transition is not legal from the swap's current status."""

    code = "INVALID_STATE"


class NoCompletedSwapError(SkillSwapError):
    """No completed swap exists between rater and target."""

    code = "NO_COMPLETED_SWAP"


class ConcurrencyError(SkillSwapError):
    """An optimistic update lost every retry to concurrent writers."""

    code = "CONCURRENT_UPDATE"
