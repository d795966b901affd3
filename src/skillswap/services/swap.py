"""SwapService — the swap lifecycle engine.

Pipeline per transition: LOAD → AUTHORIZE → GUARD → APPLY → PROPAGATE → RESPOND

The guard and the status write are one statement
(``UPDATE ... WHERE status = :expected``), so of two racing transitions on
the same swap exactly one wins and the other fails ``INVALID_STATE``.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from skillswap.domain.errors import (
    ConcurrencyError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    SelfReferenceError,
    SkillSwapError,
)
from skillswap.domain.ids import new_id, validate_id
from skillswap.domain.lifecycle import (
    SwapStatus,
    parse_action,
    require_transition,
    status_for_action,
)
from skillswap.infrastructure.database.counters import transition_status
from skillswap.infrastructure.database.schema import swaps
from skillswap.services._helpers import now_iso, require_text
from skillswap.services.base import BaseService
from skillswap.services.reputation import ReputationService
from skillswap.services.result import ServiceResult
from skillswap.services.telemetry import trace_span, traced

logger = structlog.get_logger(__name__)


class SwapService(BaseService):
    """Creates swaps and drives them through their status lifecycle."""

    # ------------------------------------------------------------------
    # request: create a pending swap
    # ------------------------------------------------------------------

    @traced
    def request(
        self,
        sender_id: str,
        receiver_id: str,
        skill_offered: str,
        skill_requested: str,
    ) -> ServiceResult:
        """Open a new swap in ``pending`` from *sender_id* to *receiver_id*."""
        op = "request_swap"
        try:
            if sender_id == receiver_id:
                raise SelfReferenceError(
                    "Cannot request a swap with yourself", user_id=sender_id
                )
            offered = require_text(skill_offered, "skill_offered").lower()
            requested = require_text(skill_requested, "skill_requested").lower()
            for user_id, role in ((receiver_id, "receiver"), (sender_id, "sender")):
                if not self._store.users.exists(user_id):
                    raise NotFoundError(
                        f"No user found with ID: {user_id}", user_id=user_id, role=role
                    )
        except SkillSwapError as exc:
            return self._fail(op, exc)

        record: dict[str, Any] = {
            "id": new_id(),
            "sender_id": sender_id,
            "receiver_id": receiver_id,
            "skill_offered": offered,
            "skill_requested": requested,
            "status": str(SwapStatus.PENDING),
            "created_at": now_iso(),
            "updated_at": None,
        }
        try:
            with self._store.transaction() as txn:
                txn.conn.execute(insert(swaps).values(**record))
        except IntegrityError:
            return self._fail(
                op,
                ConcurrencyError(
                    "Duplicate swap request; retry",
                    sender_id=sender_id,
                    receiver_id=receiver_id,
                ),
            )

        logger.info(
            "swap.requested",
            swap_id=record["id"],
            sender_id=sender_id,
            receiver_id=receiver_id,
        )
        return ServiceResult(ok=True, op=op, data=record)

    # ------------------------------------------------------------------
    # respond: receiver accepts or rejects
    # ------------------------------------------------------------------

    @traced
    def respond(self, swap_id: str, actor_id: str, action: str) -> ServiceResult:
        """Accept (``pending -> active``) or reject (``pending -> rejected``)."""
        op = "respond_swap"
        try:
            parsed = parse_action(action)
            swap = self._load(swap_id)
            if actor_id != swap["receiver_id"]:
                raise ForbiddenError(
                    "Only receiver can respond", swap_id=swap_id, actor_id=actor_id
                )
            updated = self._transition(swap, status_for_action(parsed))
        except SkillSwapError as exc:
            return self._fail(op, exc)

        logger.info("swap.responded", swap_id=swap_id, action=str(parsed))
        return ServiceResult(ok=True, op=op, data=updated)

    # ------------------------------------------------------------------
    # complete: either participant confirms the swap happened
    # ------------------------------------------------------------------

    @traced
    def complete(self, swap_id: str, actor_id: str) -> ServiceResult:
        """Move an ``active`` swap to ``completed`` and credit both participants."""
        op = "complete_swap"
        try:
            swap = self._load(swap_id)
            if actor_id not in (swap["sender_id"], swap["receiver_id"]):
                raise ForbiddenError(
                    "Only participants can complete swaps", swap_id=swap_id, actor_id=actor_id
                )
            updated = self._transition(swap, SwapStatus.COMPLETED)
        except SkillSwapError as exc:
            return self._fail(op, exc)

        warnings: list[str] = []
        with trace_span("credit_participants"):
            self._credit_participants(updated, warnings)

        logger.info("swap.completed", swap_id=swap_id, actor_id=actor_id)
        return ServiceResult(ok=True, op=op, data=updated, warnings=warnings)

    # ------------------------------------------------------------------
    # settle: replay completion credits for a completed swap
    # ------------------------------------------------------------------

    @traced
    def settle(self, swap_id: str) -> ServiceResult:
        """Re-apply completion credits for a ``completed`` swap.

        Idempotent: participants already credited for this swap are skipped.
        """
        op = "settle_swap"
        try:
            swap = self._load(swap_id)
            if swap["status"] != SwapStatus.COMPLETED:
                raise InvalidStateError(
                    f"Only completed swaps can be settled (status: {swap['status']})",
                    swap_id=swap_id,
                    status=swap["status"],
                )
        except SkillSwapError as exc:
            return self._fail(op, exc)

        warnings: list[str] = []
        credited = self._credit_participants(swap, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": swap_id, "credited": credited},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def get(self, swap_id: str) -> ServiceResult:
        """Fetch a single swap record."""
        op = "get_swap"
        try:
            swap = self._load(swap_id)
        except SkillSwapError as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data=swap)

    @traced
    def list_mine(self, user_id: str) -> ServiceResult:
        """All swaps where *user_id* is sender or receiver, newest first."""
        op = "list_swaps"
        if not self._store.users.exists(user_id):
            return self._fail(op, NotFoundError(f"No user found with ID: {user_id}"))
        items = self._store.swaps.list_for_user(user_id)
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self, swap_id: str) -> dict[str, Any]:
        swap = self._store.swaps.get(swap_id) if validate_id(swap_id) else None
        if swap is None:
            raise NotFoundError(f"No swap found with ID: {swap_id}", swap_id=swap_id)
        return swap

    def _transition(self, swap: dict[str, Any], target: SwapStatus) -> dict[str, Any]:
        """Guard against the table, then apply with a compare-and-swap write."""
        current = str(swap["status"])
        require_transition(current, target)
        now = now_iso()
        with self._store.transaction() as txn:
            won = transition_status(
                txn.conn, swap["id"], expected=current, target=str(target), now=now
            )
        if not won:
            latest = self._load(swap["id"])
            raise InvalidStateError(
                f"Swap already handled (status: {latest['status']})",
                swap_id=swap["id"],
                current=latest["status"],
                target=str(target),
            )
        return {**swap, "status": str(target), "updated_at": now}

    def _credit_participants(self, swap: dict[str, Any], warnings: list[str]) -> list[str]:
        """Record one completion per participant; each is its own atomic unit.

        INVARIANT: a failed credit is logged and reported, never retried here.
        ``settle`` replays it idempotently.
        """
        ledger = ReputationService(self._store)
        credited: list[str] = []
        for user_id in (swap["sender_id"], swap["receiver_id"]):
            try:
                result = ledger.record_completion(user_id, swap_id=swap["id"])
            except SQLAlchemyError:
                logger.error(
                    "swap.credit_failed", swap_id=swap["id"], user_id=user_id, exc_info=True
                )
                warnings.append(f"Completion credit for {user_id} not applied; run settle")
                continue
            if not result.ok:
                logger.error(
                    "swap.credit_failed",
                    swap_id=swap["id"],
                    user_id=user_id,
                    code=result.error.code if result.error else None,
                )
                warnings.append(f"Completion credit for {user_id} not applied; run settle")
            elif result.data["credited"]:
                credited.append(user_id)
        return credited
