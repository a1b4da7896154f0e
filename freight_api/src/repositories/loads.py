from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import and_, or_, select, update

from src.db.models.loads import Load
from .base import BaseRepository


class LoadRepository(BaseRepository):
    """Repository for freight loads."""

    async def get_load(self, load_id: UUID) -> Optional[Load]:
        stmt = select(Load).where(Load.id == load_id)
        return await self.scalar_one_or_none(stmt)

    async def create_load(self, **fields: Any) -> Load:
        load = Load(**fields)
        await self.add(load)
        return load

    async def patch_load(self, load: Load, **fields: Any) -> Load:
        for name, value in fields.items():
            setattr(load, name, value)
        await self.session.flush()
        return load

    async def list_loads(
        self,
        *,
        created_from: Optional[datetime] = None,
        created_before: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> List[Load]:
        """
        List loads, optionally within [created_from, created_before) and/or
        touching `location` as pickup or destination.
        """
        stmt = select(Load)
        if created_from is not None and created_before is not None:
            stmt = stmt.where(and_(Load.created_at >= created_from, Load.created_at < created_before))
        if location:
            stmt = stmt.where(
                or_(Load.current_location == location, Load.destination_location == location)
            )
        stmt = stmt.order_by(Load.created_at.asc(), Load.id.asc())
        res = await self.scalars(stmt)
        return list(res)

    async def list_with_receipt(self, *, since: Optional[datetime] = None) -> List[Load]:
        """Loads whose receipt_storage_id is set and non-empty, optionally created at or after `since`."""
        stmt = select(Load).where(
            and_(Load.receipt_storage_id.is_not(None), Load.receipt_storage_id != "")
        )
        if since is not None:
            stmt = stmt.where(Load.created_at >= since)
        stmt = stmt.order_by(Load.created_at.asc(), Load.id.asc())
        res = await self.scalars(stmt)
        return list(res)

    async def find_by_receipt_reference(self, reference: str) -> List[Load]:
        stmt = select(Load).where(Load.receipt_storage_id == reference)
        res = await self.scalars(stmt)
        return list(res)

    async def clear_receipt_reference(self, reference: str) -> List[UUID]:
        """Null out receipt_storage_id on every load holding `reference`. Returns affected ids."""
        ids = [load.id for load in await self.find_by_receipt_reference(reference)]
        if ids:
            await self.execute(
                update(Load)
                .where(Load.id.in_(ids))
                .values(receipt_storage_id=None)
                .execution_options(synchronize_session="fetch")
            )
            await self.session.flush()
        return ids
