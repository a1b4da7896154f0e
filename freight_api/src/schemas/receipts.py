from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ReceiptKind = Literal["load", "standalone"]


class StorageReferenceIn(BaseModel):
    """Request body carrying a raw storage reference (URL, token or id)."""
    storage_reference: str = Field(..., description="Raw storage reference in any accepted shape")


class UploadTarget(BaseModel):
    """Where to upload a receipt and the reference it will be stored under."""
    upload_url: str = Field(..., description="One-shot URL to upload bytes to")
    storage_reference: str = Field(..., description="Canonical storage reference")


class DownloadUrl(BaseModel):
    """Resolved download URL for a stored blob."""
    storage_reference: str = Field(..., description="Canonical storage reference")
    url: str = Field(..., description="Download URL")


class ReceiptEntry(BaseModel):
    """One receipt in the merged listing; load-attached entries are derived from loads."""
    storage_reference: str = Field(..., description="Canonical storage reference")
    created_at: datetime = Field(..., description="Creation time of the load or standalone record")
    kind: ReceiptKind = Field(..., description="'load' or 'standalone'")
    load_id: Optional[UUID] = Field(None, description="Owning load for kind='load'")
    receipt_id: Optional[UUID] = Field(None, description="Ledger record id for kind='standalone'")


class StandaloneReceiptRead(BaseModel):
    """Standalone receipt ledger record."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Receipt id")
    storage_reference: str = Field(..., description="Canonical storage reference")
    kind: ReceiptKind = Field("standalone")
    created_at: datetime = Field(..., description="Created at")


class StandaloneReceiptSaved(BaseModel):
    """Response for saving a standalone receipt."""
    success: bool = Field(True)
    storage_reference: str = Field(..., description="Canonical storage reference")
    receipt_id: UUID = Field(..., description="Ledger record id")


class StorageWarning(BaseModel):
    """A non-fatal backend failure recorded during a cleanup operation."""
    step: str = Field(..., description="Backend step that failed, e.g. blob_store.delete")
    message: str = Field(..., description="Failure description")
    storage_reference: Optional[str] = Field(None)


class DeleteReceiptResult(BaseModel):
    """Outcome of deleting a receipt by reference."""
    success: bool = Field(True)
    storage_reference: str = Field(..., description="Canonical storage reference")
    blob_deleted: bool = Field(..., description="Whether the object store reported a deletion")
    loads_cleared: List[UUID] = Field(default_factory=list)
    receipts_deleted: List[UUID] = Field(default_factory=list)
    warnings: List[StorageWarning] = Field(default_factory=list)
