from __future__ import annotations

from typing import Any, Optional


class FreightError(Exception):
    """Base exception for domain errors raised by services."""

    error_type: str = "freight_error"
    status_code: int = 500

    def details(self) -> Optional[dict[str, Any]]:
        return None


class InvalidReference(FreightError):
    """Raised when a raw storage reference cannot be normalized."""

    error_type = "invalid_reference"
    status_code = 400

    def __init__(self, raw: Any, reason: str = "Invalid storage ID format") -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"{reason}: {raw!r}")

    def details(self) -> Optional[dict[str, Any]]:
        return {"raw": self.raw if isinstance(self.raw, str) else repr(self.raw)}


class LoadNotFound(FreightError):
    """Raised when a load id does not resolve to a stored load."""

    error_type = "load_not_found"
    status_code = 404

    def __init__(self, load_id: Any) -> None:
        self.load_id = load_id
        super().__init__(f"Load not found: {load_id}")

    def details(self) -> Optional[dict[str, Any]]:
        return {"load_id": str(self.load_id)}


class ReceiptNotFound(FreightError):
    """Raised when a standalone receipt id does not resolve to a record."""

    error_type = "receipt_not_found"
    status_code = 404

    def __init__(self, receipt_id: Any) -> None:
        self.receipt_id = receipt_id
        super().__init__(f"Receipt not found: {receipt_id}")

    def details(self) -> Optional[dict[str, Any]]:
        return {"receipt_id": str(self.receipt_id)}


class BlobNotFound(FreightError):
    """Raised when the blob store has no object for a well-formed reference."""

    error_type = "blob_not_found"
    status_code = 404

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"Blob not found: {reference}")

    def details(self) -> Optional[dict[str, Any]]:
        return {"storage_reference": self.reference}


class UploadIssuanceFailed(FreightError):
    """Raised when an upload URL cannot be minted or carries no reference."""

    error_type = "upload_issuance_failed"
    status_code = 502

    def __init__(self, message: str, upload_url: Optional[str] = None) -> None:
        self.upload_url = upload_url
        super().__init__(f"Failed to generate upload URL: {message}")


class StorageOperationFailed(FreightError):
    """
    Raised (or recorded as a warning) when a backend call fails.

    `step` names the store involved ("blob_store" or "record_store") and the
    action attempted, e.g. "blob_store.delete".
    """

    error_type = "storage_operation_failed"
    status_code = 502

    def __init__(self, step: str, message: str, reference: Optional[str] = None) -> None:
        self.step = step
        self.reference = reference
        self.message = message
        super().__init__(f"{step} failed: {message}")

    @property
    def is_blob_step(self) -> bool:
        return self.step.startswith("blob_store")

    def details(self) -> Optional[dict[str, Any]]:
        return {"step": self.step, "storage_reference": self.reference}
