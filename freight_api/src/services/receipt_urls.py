from __future__ import annotations

import logging
from typing import Any

from src.core.errors import BlobNotFound, StorageOperationFailed, UploadIssuanceFailed
from src.schemas.receipts import DownloadUrl, UploadTarget
from src.storage.blob_store import BlobStore
from src.storage.references import parse_storage_reference, try_parse_storage_reference

logger = logging.getLogger(__name__)


class ReceiptUrlService:
    """
    Issues upload targets and download URLs against the object store.

    Neither operation touches the record store. Blob-store failures are raised.
    """

    def __init__(self, blob_store: BlobStore) -> None:
        self.blob_store = blob_store

    # PUBLIC_INTERFACE
    async def issue_upload_target(self) -> UploadTarget:
        """
        Mint an upload URL and extract the canonical reference the upload will land under.

        Raises:
            UploadIssuanceFailed: the object store call failed or the URL carries no reference.
        """
        try:
            upload_url = await self.blob_store.generate_upload_url()
        except StorageOperationFailed as exc:
            logger.error("Upload URL generation failed: %s", exc)
            raise UploadIssuanceFailed(exc.message) from exc

        reference = try_parse_storage_reference(upload_url)
        if reference is None:
            logger.error("No storage ID found in upload URL %s", upload_url)
            raise UploadIssuanceFailed("No storage ID found in upload URL", upload_url=upload_url)

        logger.info("Issued upload target for %s", reference)
        return UploadTarget(upload_url=upload_url, storage_reference=reference)

    # PUBLIC_INTERFACE
    async def issue_download_url(self, raw_reference: Any) -> DownloadUrl:
        """
        Resolve a raw reference to a download URL.

        Raises:
            InvalidReference: the input cannot be normalized.
            BlobNotFound: the object store has nothing under the canonical reference.
        """
        reference = parse_storage_reference(raw_reference)
        url = await self.blob_store.get_url(reference)
        if not url:
            raise BlobNotFound(reference)
        return DownloadUrl(storage_reference=reference, url=url)
