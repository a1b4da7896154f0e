from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import LoadNotFound, ReceiptNotFound, StorageOperationFailed
from src.db.models.loads import Load, Receipt
from src.repositories.loads import LoadRepository
from src.repositories.receipts import StandaloneReceiptRepository
from src.schemas.receipts import ReceiptEntry
from src.services.base import BaseService, FailureHook
from src.storage.blob_store import BlobStore
from src.storage.references import parse_storage_reference, try_parse_storage_reference

logger = logging.getLogger(__name__)


@dataclass
class DeletionReport:
    """What a receipt or load deletion touched, plus non-fatal blob-store warnings."""

    storage_reference: Optional[str] = None
    blob_deleted: bool = False
    loads_cleared: List[UUID] = field(default_factory=list)
    receipts_deleted: List[UUID] = field(default_factory=list)
    deleted_load_id: Optional[UUID] = None
    warnings: List[StorageOperationFailed] = field(default_factory=list)


class ReceiptRegistry(BaseService):
    """
    Read side of receipts plus the standalone ledger.

    Load-attached receipts are not stored separately; they are derived from
    loads with a receipt_storage_id on every read.
    """

    def __init__(self, session: AsyncSession, on_failure: Optional[FailureHook] = None) -> None:
        super().__init__(session, on_failure)
        self.loads = LoadRepository(session)
        self.receipts = StandaloneReceiptRepository(session)

    # PUBLIC_INTERFACE
    async def list_all(self) -> List[ReceiptEntry]:
        """
        Merge load-attached and standalone receipts, loads first.

        Entries with an empty reference are dropped. Order is discovery order,
        not chronological; sort by created_at if that matters.
        """
        return await self._collect()

    # PUBLIC_INTERFACE
    async def list_new_since(self, since: datetime) -> List[ReceiptEntry]:
        """Entries of both kinds created at or after `since`, in the same order as list_all."""
        return await self._collect(since=since)

    async def _collect(self, since: Optional[datetime] = None) -> List[ReceiptEntry]:
        loads = await self.loads.list_with_receipt(since=since)
        standalone = await self.receipts.list_receipts(since=since)

        entries = [
            ReceiptEntry(
                storage_reference=load.receipt_storage_id or "",
                created_at=load.created_at,
                kind="load",
                load_id=load.id,
            )
            for load in loads
        ]
        entries.extend(
            ReceiptEntry(
                storage_reference=receipt.storage_reference,
                created_at=receipt.created_at,
                kind="standalone",
                receipt_id=receipt.id,
            )
            for receipt in standalone
        )
        return [entry for entry in entries if entry.storage_reference]

    # PUBLIC_INTERFACE
    async def save_standalone(self, raw_reference: Any) -> Receipt:
        """
        Record a receipt uploaded without a load.

        The blob is not checked for existence; the upload may still be in flight.
        """
        reference = parse_storage_reference(raw_reference)
        async with self.record_store_step("record_store.save_standalone", reference):
            receipt = await self.receipts.create_receipt(reference)
            await self.session.commit()
        logger.info("Saved standalone receipt %s for %s", receipt.id, reference)
        return receipt

    # PUBLIC_INTERFACE
    async def get_standalone(self, receipt_id: UUID) -> Receipt:
        receipt = await self.receipts.get_receipt(receipt_id)
        if receipt is None:
            raise ReceiptNotFound(receipt_id)
        return receipt


class ReceiptLifecycleCoordinator(BaseService):
    """
    Keeps blobs, load references and the standalone ledger consistent.

    Record-store state is authoritative: blob-store failures during cleanup are
    recorded as warnings and reported through `on_failure`, never raised.
    Record-store failures roll back and raise StorageOperationFailed.
    """

    def __init__(
        self,
        session: AsyncSession,
        blob_store: BlobStore,
        on_failure: Optional[FailureHook] = None,
    ) -> None:
        super().__init__(session, on_failure)
        self.blob_store = blob_store
        self.loads = LoadRepository(session)
        self.receipts = StandaloneReceiptRepository(session)

    # PUBLIC_INTERFACE
    async def attach(self, load_id: UUID, raw_reference: Any) -> Load:
        """
        Point a load at a receipt blob.

        Any previous reference is overwritten without deleting its blob.

        Raises:
            LoadNotFound: no load with `load_id`.
            InvalidReference: `raw_reference` cannot be normalized.
        """
        load = await self.loads.get_load(load_id)
        if load is None:
            raise LoadNotFound(load_id)
        reference = parse_storage_reference(raw_reference)

        previous = load.receipt_storage_id
        if previous and previous != reference:
            # TODO: delete the superseded blob here once replacement cleanup is agreed (DESIGN.md)
            logger.info("Load %s receipt replaced; blob %s left in object store", load_id, previous)

        async with self.record_store_step("record_store.attach", reference):
            await self.loads.patch_load(load, receipt_storage_id=reference)
            await self.session.commit()
        return load

    # PUBLIC_INTERFACE
    async def delete_by_reference(self, raw_reference: Any) -> DeletionReport:
        """
        Remove a receipt from every place it appears.

        Steps run in order: blob, load references, standalone records. A blob
        failure does not stop the record-store steps; an orphaned blob is
        preferred over a dangling reference.
        """
        reference = parse_storage_reference(raw_reference)
        report = DeletionReport(storage_reference=reference)

        report.blob_deleted = await self._delete_blob(reference, report)

        async with self.record_store_step("record_store.delete_receipt", reference):
            report.loads_cleared = await self.loads.clear_receipt_reference(reference)
            report.receipts_deleted = await self.receipts.delete_by_reference(reference)
            await self.session.commit()

        logger.info(
            "Deleted receipt %s: blob_deleted=%s loads_cleared=%d receipts_deleted=%d",
            reference,
            report.blob_deleted,
            len(report.loads_cleared),
            len(report.receipts_deleted),
        )
        return report

    # PUBLIC_INTERFACE
    async def cascade_delete_for_load(self, load_id: UUID) -> DeletionReport:
        """
        Delete a load and, best-effort, its receipt blob.

        The load row is removed even if the blob deletion fails.

        Raises:
            LoadNotFound: no load with `load_id`.
        """
        load = await self.loads.get_load(load_id)
        if load is None:
            raise LoadNotFound(load_id)

        report = DeletionReport(storage_reference=load.receipt_storage_id, deleted_load_id=load.id)
        if load.receipt_storage_id:
            reference = try_parse_storage_reference(load.receipt_storage_id)
            if reference is None:
                self._warn(
                    report,
                    StorageOperationFailed(
                        "blob_store.delete",
                        "stored receipt reference is not parseable",
                        load.receipt_storage_id,
                    ),
                )
            else:
                report.storage_reference = reference
                report.blob_deleted = await self._delete_blob(reference, report)

        async with self.record_store_step("record_store.delete_load", str(load_id)):
            await self.loads.delete(load)
            await self.session.commit()
        logger.info("Deleted load %s", load_id)
        return report

    async def _delete_blob(self, reference: str, report: DeletionReport) -> bool:
        try:
            return await self.blob_store.delete(reference)
        except StorageOperationFailed as exc:
            self._warn(report, exc)
        except Exception as exc:
            self._warn(
                report,
                StorageOperationFailed("blob_store.delete", str(exc) or type(exc).__name__, reference),
            )
        return False

    def _warn(self, report: DeletionReport, failure: StorageOperationFailed) -> None:
        report.warnings.append(failure)
        self.on_failure(failure)
