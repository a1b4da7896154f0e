from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select

from src.db.models.loads import Receipt
from .base import BaseRepository


class StandaloneReceiptRepository(BaseRepository):
    """Repository for the standalone receipt ledger."""

    async def get_receipt(self, receipt_id: UUID) -> Optional[Receipt]:
        stmt = select(Receipt).where(Receipt.id == receipt_id)
        return await self.scalar_one_or_none(stmt)

    async def create_receipt(self, storage_reference: str) -> Receipt:
        receipt = Receipt(storage_reference=storage_reference, kind="standalone")
        await self.add(receipt)
        return receipt

    async def list_receipts(self, *, since: Optional[datetime] = None) -> List[Receipt]:
        stmt = select(Receipt).where(Receipt.storage_reference != "")
        if since is not None:
            stmt = stmt.where(Receipt.created_at >= since)
        stmt = stmt.order_by(Receipt.created_at.asc(), Receipt.id.asc())
        res = await self.scalars(stmt)
        return list(res)

    async def delete_by_reference(self, reference: str) -> List[UUID]:
        """Delete every ledger record holding `reference`. Returns deleted ids."""
        res = await self.scalars(select(Receipt.id).where(Receipt.storage_reference == reference))
        ids = list(res)
        if ids:
            await self.execute(
                delete(Receipt)
                .where(Receipt.id.in_(ids))
                .execution_options(synchronize_session="fetch")
            )
            await self.session.flush()
        return ids
