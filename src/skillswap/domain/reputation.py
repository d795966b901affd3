"""Reputation arithmetic — running-average rating updates.

The weight of the existing rating is the target's completed-swap count,
not a separate "times rated" counter. Nothing limits a pair to one rating
per completed swap, so repeated ratings reuse the same weight.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from skillswap.domain.errors import ValidationError

MIN_SCORE = 1
MAX_SCORE = 5
MAX_RATING = 5.0

_TWO_PLACES = Decimal("0.01")


def validate_score(score: object) -> int:
    """Return *score* if it is an integer in [1, 5].

    Raises:
        ValidationError: For non-integers (bools included) or out-of-range values.
    """
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError(f"Score must be an integer, got {score!r}")
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError(
            f"Score must be between {MIN_SCORE} and {MAX_SCORE}, got {score}",
            score=score,
        )
    return score


def round2(value: float | Decimal) -> float:
    """Round half-up to two decimal places.

    Examples:
        >>> round2(4.25)
        4.25
        >>> round2(Decimal("3.125"))
        3.13
    """
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def running_average(current_rating: float | None, swaps_done: int | None, score: int) -> float:
    """Fold *score* into *current_rating* weighted by *swaps_done*.

    ``round2((rating * swaps_done + score) / (swaps_done + 1))``

    Examples:
        >>> running_average(4.0, 3, 5)
        4.25
        >>> running_average(0, 0, 3)
        3.0
    """
    rating = Decimal(str(current_rating or 0))
    count = swaps_done or 0
    total = rating * count + score
    return round2(total / (count + 1))
