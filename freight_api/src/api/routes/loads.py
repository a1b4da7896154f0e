from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from src.core.deps import get_load_service, get_receipt_coordinator
from src.schemas.common import MessageResponse
from src.schemas.loads import LoadCreate, LoadRead, LoadUpdate
from src.schemas.receipts import StorageReferenceIn
from src.services.loads import LoadService
from src.services.receipts import ReceiptLifecycleCoordinator

router = APIRouter(prefix="/loads", tags=["Loads"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[LoadRead],
    summary="List loads",
    description=(
        "List loads ordered by created_at. The date range applies only when both "
        "date_from and date_to are given; location matches pickup or destination."
    ),
)
async def list_loads(
    service: LoadService = Depends(get_load_service),
    date_from: Optional[date] = Query(None, description="First day (inclusive, UTC)"),
    date_to: Optional[date] = Query(None, description="Last day (inclusive, UTC)"),
    location: Optional[str] = Query(None, description="Pickup or destination location"),
) -> List[LoadRead]:
    items = await service.list_loads(date_from=date_from, date_to=date_to, location=location)
    return [LoadRead.model_validate(x) for x in items]


# PUBLIC_INTERFACE
@router.get(
    "/today",
    response_model=List[LoadRead],
    summary="List today's loads",
    description="List loads created today (UTC).",
)
async def list_today_loads(service: LoadService = Depends(get_load_service)) -> List[LoadRead]:
    items = await service.list_today_loads()
    return [LoadRead.model_validate(x) for x in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=LoadRead,
    status_code=201,
    summary="Create load",
)
async def create_load(
    payload: LoadCreate,
    service: LoadService = Depends(get_load_service),
) -> LoadRead:
    created = await service.create_load(payload)
    return LoadRead.model_validate(created)


# PUBLIC_INTERFACE
@router.get(
    "/{load_id}",
    response_model=LoadRead,
    summary="Get load",
)
async def get_load(
    load_id: UUID = Path(...),
    service: LoadService = Depends(get_load_service),
) -> LoadRead:
    return LoadRead.model_validate(await service.get_load(load_id))


# PUBLIC_INTERFACE
@router.put(
    "/{load_id}",
    response_model=LoadRead,
    summary="Update load",
    description="Replace a load's editable fields. The attached receipt is not changed.",
)
async def update_load(
    payload: LoadUpdate,
    load_id: UUID = Path(...),
    service: LoadService = Depends(get_load_service),
) -> LoadRead:
    updated = await service.update_load(load_id, payload)
    return LoadRead.model_validate(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{load_id}",
    response_model=MessageResponse,
    summary="Delete load",
    description=(
        "Delete a load. Its receipt blob is deleted best-effort; a failed blob "
        "deletion is reported in details.warnings but never blocks the delete."
    ),
)
async def delete_load(
    load_id: UUID = Path(...),
    service: LoadService = Depends(get_load_service),
) -> MessageResponse:
    report = await service.delete_load(load_id)
    return MessageResponse(
        message="Load deleted",
        details={
            "load_id": str(load_id),
            "storage_reference": report.storage_reference,
            "blob_deleted": report.blob_deleted,
            "warnings": [w.step for w in report.warnings],
        },
    )


# PUBLIC_INTERFACE
@router.post(
    "/{load_id}/receipt",
    response_model=LoadRead,
    summary="Attach receipt to load",
    description=(
        "Normalize the given storage reference and store it on the load. A "
        "previously attached blob is not deleted."
    ),
)
async def attach_receipt(
    payload: StorageReferenceIn,
    load_id: UUID = Path(...),
    coordinator: ReceiptLifecycleCoordinator = Depends(get_receipt_coordinator),
) -> LoadRead:
    load = await coordinator.attach(load_id, payload.storage_reference)
    return LoadRead.model_validate(load)
