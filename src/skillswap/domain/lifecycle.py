"""Swap status lifecycle.

Happy path is ``pending -> active -> completed``; a receiver may instead
move ``pending -> rejected``. ``completed`` and ``rejected`` are terminal.
Transitions are monotone: nothing ever moves back.
"""

from __future__ import annotations

from enum import StrEnum

from skillswap.domain.errors import InvalidStateError, ValidationError


class SwapStatus(StrEnum):
    """Machine status for a swap."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    COMPLETED = "completed"


class SwapAction(StrEnum):
    """Receiver responses to a pending swap."""

    ACCEPT = "accept"
    REJECT = "reject"


SWAP_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["active", "rejected"],
    "active": ["completed"],
    "rejected": [],
    "completed": [],
}

TERMINAL_STATUSES = frozenset({SwapStatus.REJECTED, SwapStatus.COMPLETED})

_ACTION_TARGETS: dict[SwapAction, SwapStatus] = {
    SwapAction.ACCEPT: SwapStatus.ACTIVE,
    SwapAction.REJECT: SwapStatus.REJECTED,
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = SWAP_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


def require_transition(current: str, target: str) -> None:
    """Raise :class:`InvalidStateError` unless *current* -> *target* is allowed."""
    if not is_valid_transition(current, target):
        allowed = SWAP_TRANSITIONS.get(current, [])
        raise InvalidStateError(
            f"Invalid status transition: {current} -> {target}. Allowed: {allowed}",
            current=current,
            target=target,
            terminal=current in TERMINAL_STATUSES,
        )


def parse_action(action: str) -> SwapAction:
    """Coerce a raw action string into a :class:`SwapAction`."""
    try:
        return SwapAction(action.strip().lower())
    except (AttributeError, ValueError):
        raise ValidationError(
            f"Unknown action: {action!r}. Expected one of {[a.value for a in SwapAction]}"
        ) from None


def status_for_action(action: SwapAction) -> SwapStatus:
    """The status a pending swap moves to for *action*."""
    return _ACTION_TARGETS[action]
