from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import LoadNotFound
from src.db.models.loads import Load
from src.repositories.loads import LoadRepository
from src.schemas.loads import LoadCreate, LoadUpdate
from src.services.base import BaseService, FailureHook
from src.services.receipts import DeletionReport, ReceiptLifecycleCoordinator
from src.storage.blob_store import BlobStore

logger = logging.getLogger(__name__)


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class LoadService(BaseService):
    """
    Domain service for freight loads.

    Plain CRUD and listing; deletion goes through the receipt coordinator so the
    attached blob is cleaned up best-effort.
    """

    def __init__(
        self,
        session: AsyncSession,
        blob_store: BlobStore,
        on_failure: Optional[FailureHook] = None,
    ) -> None:
        super().__init__(session, on_failure)
        self.repo = LoadRepository(session)
        self.coordinator = ReceiptLifecycleCoordinator(session, blob_store, on_failure=self.on_failure)

    async def get_load(self, load_id: UUID) -> Load:
        load = await self.repo.get_load(load_id)
        if load is None:
            raise LoadNotFound(load_id)
        return load

    # PUBLIC_INTERFACE
    async def create_load(self, payload: LoadCreate) -> Load:
        async with self.record_store_step("record_store.create_load"):
            load = await self.repo.create_load(**payload.model_dump())
            await self.session.commit()
        logger.info("Created load %s", load.id)
        return load

    # PUBLIC_INTERFACE
    async def update_load(self, load_id: UUID, payload: LoadUpdate) -> Load:
        """Replace a load's editable fields. The receipt reference is left as is."""
        load = await self.get_load(load_id)
        async with self.record_store_step("record_store.update_load"):
            await self.repo.patch_load(load, **payload.model_dump())
            await self.session.commit()
        return load

    # PUBLIC_INTERFACE
    async def list_loads(
        self,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        location: Optional[str] = None,
    ) -> List[Load]:
        """
        List loads. The date range applies only when both ends are given and is
        inclusive of both days (UTC).
        """
        created_from = created_before = None
        if date_from and date_to:
            created_from = _day_start(date_from)
            created_before = _day_start(date_to + timedelta(days=1))
        return await self.repo.list_loads(
            created_from=created_from, created_before=created_before, location=location
        )

    # PUBLIC_INTERFACE
    async def list_today_loads(self, today: Optional[date] = None) -> List[Load]:
        today = today or datetime.now(timezone.utc).date()
        return await self.list_loads(date_from=today, date_to=today)

    # PUBLIC_INTERFACE
    async def delete_load(self, load_id: UUID) -> DeletionReport:
        """Delete a load, cascading best-effort to its receipt blob."""
        return await self.coordinator.cascade_delete_for_load(load_id)
