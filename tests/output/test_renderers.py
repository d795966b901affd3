"""Tests for the operation-specific Rich renderers."""

from __future__ import annotations

from skillswap.output.renderers import render_quiet, render_result
from skillswap.services.result import ServiceError, ServiceResult


def _user(uid: str, name: str, overlap: int) -> dict[str, object]:
    return {
        "id": uid,
        "name": name,
        "overlap": overlap,
        "rating": 4.25,
        "swaps_done": 3,
        "skills_teach": ["guitar", "python"],
    }


class TestRenderResult:
    def test_profile(self) -> None:
        result = ServiceResult(
            ok=True,
            op="get_profile",
            data={
                "id": "u1",
                "name": "Ann",
                "skills_teach": ["python"],
                "skills_learn": [],
                "rating": 4.25,
                "swaps_done": 3,
            },
        )
        out = render_result(result)
        assert "get_profile" in out
        assert "name: Ann" in out
        assert "rating: 4.25" in out
        assert "skills_teach: python" in out
        assert "skills_learn" not in out

    def test_feed_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_matches",
            data={"items": [_user("u2", "Bob", 2), _user("u3", "Cat", 1)], "count": 2},
        )
        out = render_result(result)
        assert "Overlap" in out
        assert "Bob" in out
        assert "4.25" in out

    def test_empty_feed(self) -> None:
        result = ServiceResult(ok=True, op="list_feed", data={"items": []})
        assert "No users found." in render_result(result)

    def test_swap_list(self) -> None:
        item = {
            "id": "s1",
            "status": "active",
            "sender_id": "u1",
            "receiver_id": "u2",
            "skill_offered": "python",
            "skill_requested": "guitar",
            "created_at": "2026-01-01T00:00:00",
        }
        result = ServiceResult(ok=True, op="list_swaps", data={"items": [item], "count": 1})
        out = render_result(result)
        assert "active" in out
        assert "Created" not in out
        assert "Created" in render_result(result, verbose=True)

    def test_warnings_left_to_the_caller(self) -> None:
        result = ServiceResult(
            ok=True, op="complete_swap", data={"id": "s1"}, warnings=["run settle"]
        )
        assert "run settle" not in render_result(result)

    def test_error(self) -> None:
        result = ServiceResult(
            ok=False,
            op="submit_rating",
            error=ServiceError(
                code="NO_COMPLETED_SWAP",
                message="No completed swap found between users",
                detail={"target_id": "u2"},
            ),
        )
        out = render_result(result)
        assert out.startswith("ERROR")
        assert "[NO_COMPLETED_SWAP]" in out
        assert "target_id" not in out
        assert "target_id: u2" in render_result(result, verbose=True)

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="settle_swap", data={"id": "s1", "credited": []})
        out = render_result(result)
        assert "settle_swap" in out
        assert "id: s1" in out

    def test_telemetry_tree_in_verbose(self) -> None:
        result = ServiceResult(
            ok=True,
            op="init",
            data={"db_path": "x.db"},
            meta={"telemetry": {"name": "InitService.init", "duration_ms": 1.5}},
        )
        assert "InitService.init" in render_result(result, verbose=True)
        assert "InitService.init" not in render_result(result)


class TestRenderQuiet:
    def test_items_ids(self) -> None:
        result = ServiceResult(
            ok=True, op="list_matches", data={"items": [_user("u2", "Bob", 1)]}
        )
        assert render_quiet(result) == "u2"

    def test_no_id(self) -> None:
        result = ServiceResult(ok=True, op="init", data={"db_path": "x"})
        assert render_quiet(result) == "OK: init"
