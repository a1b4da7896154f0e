from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import StorageOperationFailed

logger = logging.getLogger(__name__)

FailureHook = Callable[[StorageOperationFailed], None]


# PUBLIC_INTERFACE
def log_storage_failure(failure: StorageOperationFailed) -> None:
    """Default failure hook: emit a structured warning through logging."""
    logger.warning(
        "Storage step failed: step=%s reference=%s error=%s",
        failure.step,
        failure.reference or "-",
        failure.message,
    )


class BaseService:
    """
    Base class for services. Holds a session for use across multiple repositories.

    Services should keep business logic and orchestration, delegating data access
    to repositories. `on_failure` is called at every backend failure point,
    fatal or not, so callers can observe cross-store inconsistencies.
    """

    def __init__(self, session: AsyncSession, on_failure: Optional[FailureHook] = None) -> None:
        self.session = session
        self.on_failure: FailureHook = on_failure or log_storage_failure

    @asynccontextmanager
    async def record_store_step(self, step: str, reference: Optional[str] = None) -> AsyncIterator[None]:
        """
        Run record-store work; on a database error roll back, report it through
        `on_failure` and raise StorageOperationFailed.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Record store step %s failed", step)
            failure = StorageOperationFailed(step, str(exc), reference)
            self.on_failure(failure)
            raise failure from exc
