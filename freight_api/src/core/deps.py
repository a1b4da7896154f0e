from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.session import get_async_session
from src.services.loads import LoadService
from src.services.receipt_urls import ReceiptUrlService
from src.services.receipts import ReceiptLifecycleCoordinator, ReceiptRegistry
from src.storage.blob_store import BlobStore


# PUBLIC_INTERFACE
def get_blob_store(request: Request) -> BlobStore:
    """Return the process-wide BlobStore attached to the application state."""
    return request.app.state.blob_store


# PUBLIC_INTERFACE
def get_receipt_url_service(blob_store: BlobStore = Depends(get_blob_store)) -> ReceiptUrlService:
    return ReceiptUrlService(blob_store)


# PUBLIC_INTERFACE
def get_receipt_registry(session: AsyncSession = Depends(get_async_session)) -> ReceiptRegistry:
    return ReceiptRegistry(session)


# PUBLIC_INTERFACE
def get_receipt_coordinator(
    session: AsyncSession = Depends(get_async_session),
    blob_store: BlobStore = Depends(get_blob_store),
) -> ReceiptLifecycleCoordinator:
    return ReceiptLifecycleCoordinator(session, blob_store)


# PUBLIC_INTERFACE
def get_load_service(
    session: AsyncSession = Depends(get_async_session),
    blob_store: BlobStore = Depends(get_blob_store),
) -> LoadService:
    return LoadService(session, blob_store)
