"""ReputationService — the ledger owning ``rating`` and ``swaps_done``.

Two independent effects:
- record_completion: atomic +1 on ``swaps_done``, optionally idempotent
  per (swap, user) through a completion credit.
- submit_rating: running-average update of ``rating`` via compare-and-swap,
  gated on a completed swap between rater and target.

No other code path writes these two columns.
"""

from __future__ import annotations

import structlog

from skillswap.domain.errors import (
    ConcurrencyError,
    NoCompletedSwapError,
    NotFoundError,
    SelfRatingError,
    SkillSwapError,
)
from skillswap.domain.reputation import running_average, validate_score
from skillswap.infrastructure.database.counters import (
    claim_completion_credit,
    compare_and_set_rating,
    increment_swaps_done,
)
from skillswap.services._helpers import now_iso
from skillswap.services.base import BaseService
from skillswap.services.result import ServiceResult
from skillswap.services.telemetry import trace_span, traced

logger = structlog.get_logger(__name__)


class ReputationService(BaseService):
    """Handles completion counters and rating submissions."""

    # ------------------------------------------------------------------
    # record_completion
    # ------------------------------------------------------------------

    @traced
    def record_completion(self, user_id: str, *, swap_id: str | None = None) -> ServiceResult:
        """Add one completed swap to *user_id*'s tally.

        With *swap_id*, the increment is applied at most once per
        (swap, user) pair; a replay returns ``credited=False``.
        """
        op = "record_completion"
        try:
            swaps_done, credited = self._apply_completion(user_id, swap_id)
        except SkillSwapError as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "user_id": user_id,
                "swap_id": swap_id,
                "swaps_done": swaps_done,
                "credited": credited,
            },
        )

    def _apply_completion(self, user_id: str, swap_id: str | None) -> tuple[int, bool]:
        """Credit and increment in one transaction. Raises on unknown user or swap."""
        if not self._store.users.exists(user_id):
            raise NotFoundError(f"No user found with ID: {user_id}", user_id=user_id)
        if swap_id is not None and self._store.swaps.get(swap_id) is None:
            raise NotFoundError(f"No swap found with ID: {swap_id}", swap_id=swap_id)

        with self._store.transaction() as txn:
            credited = swap_id is None or claim_completion_credit(
                txn.conn, swap_id, user_id, now_iso()
            )
            new_value: int | None = None
            if credited:
                new_value = increment_swaps_done(txn.conn, user_id)
                if new_value is None:
                    raise NotFoundError(f"No user found with ID: {user_id}", user_id=user_id)

        if new_value is None:
            logger.info("ledger.completion_replayed", user_id=user_id, swap_id=swap_id)
            counters = self._store.users.get_counters(user_id)
            return int(counters[1]) if counters else 0, False

        logger.info(
            "ledger.completion_recorded",
            user_id=user_id,
            swap_id=swap_id,
            swaps_done=new_value,
        )
        return new_value, True

    # ------------------------------------------------------------------
    # submit_rating
    # ------------------------------------------------------------------

    @traced
    def submit_rating(self, rater_id: str, target_id: str, score: int) -> ServiceResult:
        """Fold *score* into *target_id*'s running-average rating.

        Order of checks: self-rating, score range, target existence,
        completed swap between the two.
        """
        op = "submit_rating"
        try:
            if rater_id == target_id:
                raise SelfRatingError("Cannot rate yourself", user_id=rater_id)
            validate_score(score)
            if not self._store.users.exists(target_id):
                raise NotFoundError(f"No user found with ID: {target_id}", user_id=target_id)
            if not self._store.swaps.has_completed_between(rater_id, target_id):
                raise NoCompletedSwapError(
                    "No completed swap found between users",
                    rater_id=rater_id,
                    target_id=target_id,
                )
            with trace_span("cas_rating") as span:
                previous, new_rating, swaps_done, attempts = self._cas_rating(target_id, score)
                if span:
                    span.annotate("attempts", attempts)
        except SkillSwapError as exc:
            return self._fail(op, exc)

        logger.info(
            "ledger.rating_recorded",
            rater_id=rater_id,
            target_id=target_id,
            score=score,
            rating=new_rating,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "user_id": target_id,
                "previous_rating": previous,
                "rating": new_rating,
                "swaps_done": swaps_done,
                "score": score,
            },
        )

    def _cas_rating(self, target_id: str, score: int) -> tuple[float, float, int, int]:
        """Optimistic read-compute-write loop.

        Returns ``(previous, new, swaps_done_weight, attempts)``.
        """
        max_attempts = self._store.settings.ledger.max_cas_retries
        for attempt in range(1, max_attempts + 1):
            counters = self._store.users.get_counters(target_id)
            if counters is None:
                raise NotFoundError(f"No user found with ID: {target_id}", user_id=target_id)
            rating, swaps_done = counters
            new_rating = running_average(rating, swaps_done, score)
            with self._store.transaction() as txn:
                if compare_and_set_rating(
                    txn.conn,
                    target_id,
                    expected_rating=rating,
                    expected_swaps_done=swaps_done,
                    new_rating=new_rating,
                ):
                    return float(rating), new_rating, int(swaps_done), attempt
            logger.debug("ledger.rating_cas_retry", user_id=target_id, attempt=attempt)

        raise ConcurrencyError(
            f"Rating update for {target_id} lost {max_attempts} consecutive races",
            user_id=target_id,
            attempts=max_attempts,
        )
