"""Tests for BaseService error folding."""

from skillswap.domain.errors import ForbiddenError, NoCompletedSwapError
from skillswap.services.base import BaseService


class TestFail:
    def test_folds_code_message_and_detail(self) -> None:
        result = BaseService._fail(
            "respond_swap", ForbiddenError("Only receiver can respond", swap_id="s1")
        )
        assert not result.ok
        assert result.op == "respond_swap"
        assert result.error is not None
        assert result.error.code == "FORBIDDEN"
        assert result.error.message == "Only receiver can respond"
        assert result.error.detail == {"swap_id": "s1"}

    def test_error_subclass_code(self) -> None:
        result = BaseService._fail("submit_rating", NoCompletedSwapError("none"))
        assert result.error is not None
        assert result.error.code == "NO_COMPLETED_SWAP"
