from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from src.core.deps import get_receipt_coordinator, get_receipt_registry, get_receipt_url_service
from src.schemas.receipts import (
    DeleteReceiptResult,
    DownloadUrl,
    ReceiptEntry,
    StandaloneReceiptRead,
    StandaloneReceiptSaved,
    StorageReferenceIn,
    StorageWarning,
    UploadTarget,
)
from src.services.receipt_urls import ReceiptUrlService
from src.services.receipts import DeletionReport, ReceiptLifecycleCoordinator, ReceiptRegistry

router = APIRouter(prefix="/receipts", tags=["Receipts"])


def _to_result(report: DeletionReport) -> DeleteReceiptResult:
    return DeleteReceiptResult(
        success=True,
        storage_reference=report.storage_reference or "",
        blob_deleted=report.blob_deleted,
        loads_cleared=report.loads_cleared,
        receipts_deleted=report.receipts_deleted,
        warnings=[
            StorageWarning(step=w.step, message=w.message, storage_reference=w.reference)
            for w in report.warnings
        ],
    )


# PUBLIC_INTERFACE
@router.post(
    "/upload-url",
    response_model=UploadTarget,
    summary="Issue upload URL",
    description="Mint an object store upload URL and return the canonical reference it will be stored under.",
)
async def issue_upload_target(
    service: ReceiptUrlService = Depends(get_receipt_url_service),
) -> UploadTarget:
    return await service.issue_upload_target()


# PUBLIC_INTERFACE
@router.post(
    "/download-url",
    response_model=DownloadUrl,
    summary="Issue download URL",
    description="Resolve a storage reference (any accepted shape) to a download URL.",
)
async def issue_download_url(
    payload: StorageReferenceIn,
    service: ReceiptUrlService = Depends(get_receipt_url_service),
) -> DownloadUrl:
    return await service.issue_download_url(payload.storage_reference)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[ReceiptEntry],
    summary="List receipts",
    description="Load-attached receipts first, then standalone receipts. Not sorted by time.",
)
async def list_receipts(registry: ReceiptRegistry = Depends(get_receipt_registry)) -> List[ReceiptEntry]:
    return await registry.list_all()


# PUBLIC_INTERFACE
@router.get(
    "/new",
    response_model=List[ReceiptEntry],
    summary="List receipts created since a time",
)
async def list_new_receipts(
    since: datetime = Query(..., description="Only receipts created at or after this time"),
    registry: ReceiptRegistry = Depends(get_receipt_registry),
) -> List[ReceiptEntry]:
    return await registry.list_new_since(since)


# PUBLIC_INTERFACE
@router.post(
    "/standalone",
    response_model=StandaloneReceiptSaved,
    status_code=201,
    summary="Save standalone receipt",
    description="Record an uploaded receipt that is not yet linked to a load.",
)
async def save_standalone_receipt(
    payload: StorageReferenceIn,
    registry: ReceiptRegistry = Depends(get_receipt_registry),
) -> StandaloneReceiptSaved:
    receipt = await registry.save_standalone(payload.storage_reference)
    return StandaloneReceiptSaved(
        success=True, storage_reference=receipt.storage_reference, receipt_id=receipt.id
    )


# PUBLIC_INTERFACE
@router.get(
    "/standalone/{receipt_id}",
    response_model=StandaloneReceiptRead,
    summary="Get standalone receipt",
)
async def get_standalone_receipt(
    receipt_id: UUID = Path(...),
    registry: ReceiptRegistry = Depends(get_receipt_registry),
) -> StandaloneReceiptRead:
    return StandaloneReceiptRead.model_validate(await registry.get_standalone(receipt_id))


# PUBLIC_INTERFACE
@router.post(
    "/delete",
    response_model=DeleteReceiptResult,
    summary="Delete receipt by reference",
    description=(
        "Delete the blob, clear the reference from every load and remove every "
        "standalone record holding it. Blob deletion failures are reported as warnings."
    ),
)
async def delete_receipt_by_reference(
    payload: StorageReferenceIn,
    coordinator: ReceiptLifecycleCoordinator = Depends(get_receipt_coordinator),
) -> DeleteReceiptResult:
    report = await coordinator.delete_by_reference(payload.storage_reference)
    return _to_result(report)
