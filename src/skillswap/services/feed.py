"""FeedService — overlap-ranked candidate feeds.

Both surfaces are read-only and O(n) over the other users:
- list_feed: every other user, ranked
- list_matches: the same ranking filtered to ``overlap > 0``

Ranking key: overlap desc, rating desc, then user id asc so that exact
ties come back in the same order on every call.
"""

from __future__ import annotations

from typing import Any

from skillswap.domain.errors import NotFoundError
from skillswap.domain.skills import overlap
from skillswap.services.base import BaseService
from skillswap.services.result import ServiceResult
from skillswap.services.telemetry import traced


def rank_candidates(
    viewer_learn: list[str],
    candidates: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Attach an ``overlap`` field to each candidate and sort the pool."""
    enriched = [
        {**c, "overlap": overlap(c.get("skills_teach"), viewer_learn)} for c in candidates
    ]
    enriched.sort(key=lambda u: str(u["id"]))
    enriched.sort(key=lambda u: (u["overlap"], u.get("rating") or 0.0), reverse=True)
    return enriched


class FeedService(BaseService):
    """Builds ranked user feeds for a viewer."""

    @traced
    def list_feed(self, viewer_id: str, *, limit: int | None = None) -> ServiceResult:
        """All other users, ranked by overlap with the viewer's learn list."""
        return self._build("list_feed", viewer_id, matches_only=False, limit=limit)

    @traced
    def list_matches(self, viewer_id: str, *, limit: int | None = None) -> ServiceResult:
        """Other users teaching at least one skill the viewer wants to learn."""
        return self._build("list_matches", viewer_id, matches_only=True, limit=limit)

    def _build(
        self,
        op: str,
        viewer_id: str,
        *,
        matches_only: bool,
        limit: int | None,
    ) -> ServiceResult:
        viewer = self._store.users.get(viewer_id)
        if viewer is None:
            return self._fail(
                op, NotFoundError(f"No user found with ID: {viewer_id}", user_id=viewer_id)
            )

        ranked = rank_candidates(viewer["skills_learn"], self._store.users.list_others(viewer_id))
        if matches_only:
            ranked = [u for u in ranked if u["overlap"] > 0]

        if limit is None:
            limit = self._store.settings.feed.default_limit
        total = len(ranked)
        if limit > 0:
            ranked = ranked[:limit]

        return ServiceResult(
            ok=True,
            op=op,
            data={"viewer_id": viewer_id, "items": ranked, "count": len(ranked), "total": total},
        )
