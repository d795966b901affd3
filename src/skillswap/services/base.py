"""BaseService — abstract foundation for all skillswap services.

Every service receives a :class:`Store` at construction time. The Store
provides read repositories and transactional write access. Services own
their transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from skillswap.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from skillswap.domain.errors import SkillSwapError
    from skillswap.infrastructure.store import Store

logger = structlog.get_logger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Subclasses implement domain operations (profile, feed, swap, reputation)
    using the store for all data access. Domain code raises
    :class:`SkillSwapError` subclasses; public methods convert them with
    :meth:`_fail`.

    Usage::

        class SwapService(BaseService):
            def request(self, ...) -> ServiceResult:
                try:
                    ...
                except SkillSwapError as exc:
                    return self._fail("request_swap", exc)
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @staticmethod
    def _fail(op: str, exc: SkillSwapError) -> ServiceResult:
        """Fold a typed domain error into a failed ServiceResult."""
        logger.info("service.rejected", op=op, code=exc.code, reason=exc.message)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
        )
