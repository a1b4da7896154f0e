from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable
from uuid import uuid4

import httpx

from src.core.errors import StorageOperationFailed
from src.core.settings import AppSettings

logger = logging.getLogger(__name__)


@runtime_checkable
class BlobStore(Protocol):
    """
    Object store protocol consumed by the receipt services.

    References passed in are always canonical; implementations do not
    normalize them again. Transport errors surface as StorageOperationFailed.
    """

    async def generate_upload_url(self) -> str:
        """Mint a one-shot URL the client uploads bytes to."""
        ...

    async def get_url(self, reference: str) -> Optional[str]:
        """Return a download URL, or None if no object exists for the reference."""
        ...

    async def delete(self, reference: str) -> bool:
        """Delete the object. Return True when something was deleted."""
        ...


class HttpBlobStore:
    """
    BlobStore backed by the object store's HTTP API.

    Endpoints (relative to base_url):
      - POST   /upload-urls           -> {"uploadUrl": "..."}
      - GET    /objects/{ref}/url     -> {"url": "..."} or 404
      - DELETE /objects/{ref}         -> 2xx or 404
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"), headers=headers, timeout=timeout
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def generate_upload_url(self) -> str:
        try:
            resp = await self._client.post("/upload-urls")
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise StorageOperationFailed("blob_store.generate_upload_url", str(exc)) from exc
        url = (body.get("uploadUrl") or body.get("url")) if isinstance(body, dict) else None
        if not isinstance(url, str) or not url:
            raise StorageOperationFailed(
                "blob_store.generate_upload_url", "response did not contain an upload URL"
            )
        return url

    async def get_url(self, reference: str) -> Optional[str]:
        try:
            resp = await self._client.get(f"/objects/{reference}/url")
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise StorageOperationFailed("blob_store.get_url", str(exc), reference) from exc
        url = body.get("url") if isinstance(body, dict) else None
        return url or None

    async def delete(self, reference: str) -> bool:
        try:
            resp = await self._client.delete(f"/objects/{reference}")
            if resp.status_code == 404:
                logger.info("Blob %s already absent from object store", reference)
                return False
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageOperationFailed("blob_store.delete", str(exc), reference) from exc
        return True


class InMemoryBlobStore:
    """In-process blob store for development and testing."""

    def __init__(self, base_url: str = "memory://blobs") -> None:
        self.base_url = base_url.rstrip("/")
        self._objects: dict[str, bytes] = {}

    async def generate_upload_url(self) -> str:
        return f"{self.base_url}/upload?token={uuid4()}"

    def put(self, reference: str, data: bytes) -> None:
        """Complete an upload for `reference`."""
        self._objects[reference] = data

    def has(self, reference: str) -> bool:
        return reference in self._objects

    async def get_url(self, reference: str) -> Optional[str]:
        if reference not in self._objects:
            return None
        return f"{self.base_url}/objects/{reference}"

    async def delete(self, reference: str) -> bool:
        return self._objects.pop(reference, None) is not None


# PUBLIC_INTERFACE
def build_blob_store(settings: AppSettings) -> BlobStore:
    """Construct the configured BlobStore backend."""
    if settings.BLOB_STORE_BACKEND == "memory":
        logger.warning("Using in-memory blob store; uploaded receipts will not survive a restart.")
        return InMemoryBlobStore()
    return HttpBlobStore(
        settings.BLOB_STORE_URL,
        api_key=settings.BLOB_STORE_API_KEY,
        timeout=settings.BLOB_STORE_TIMEOUT_SECONDS,
    )
