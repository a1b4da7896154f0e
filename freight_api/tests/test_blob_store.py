import httpx
import pytest

from src.core.errors import StorageOperationFailed
from src.core.settings import AppSettings
from src.storage.blob_store import BlobStore, HttpBlobStore, InMemoryBlobStore, build_blob_store

from .conftest import REF


def _store(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://blobs.test/api/storage")
    return HttpBlobStore("http://blobs.test/api/storage", client=client)


async def test_http_generate_upload_url():
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json={"uploadUrl": f"http://blobs.test/upload?token={REF}"})

    store = _store(handler)
    assert await store.generate_upload_url() == f"http://blobs.test/upload?token={REF}"
    assert seen == [("POST", "/api/storage/upload-urls")]


async def test_http_generate_upload_url_without_url_fails():
    store = _store(lambda request: httpx.Response(200, json={}))
    with pytest.raises(StorageOperationFailed) as excinfo:
        await store.generate_upload_url()
    assert excinfo.value.step == "blob_store.generate_upload_url"


async def test_http_get_url_found_and_missing():
    def handler(request):
        if REF in request.url.path:
            return httpx.Response(200, json={"url": f"http://cdn.test/{REF}"})
        return httpx.Response(404)

    store = _store(handler)
    assert await store.get_url(REF) == f"http://cdn.test/{REF}"
    assert await store.get_url("00000000-0000-0000-0000-000000000000") is None


async def test_http_get_url_server_error_raises():
    store = _store(lambda request: httpx.Response(500))
    with pytest.raises(StorageOperationFailed) as excinfo:
        await store.get_url(REF)
    assert excinfo.value.is_blob_step
    assert excinfo.value.reference == REF


async def test_http_delete():
    statuses = iter([204, 404])
    store = _store(lambda request: httpx.Response(next(statuses)))
    assert await store.delete(REF) is True
    assert await store.delete(REF) is False


async def test_http_delete_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)
    with pytest.raises(StorageOperationFailed) as excinfo:
        await store.delete(REF)
    assert excinfo.value.step == "blob_store.delete"


async def test_http_sends_bearer_token():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(204)

    store = HttpBlobStore("http://blobs.test", api_key="secret")
    # swap transport while keeping the configured headers
    store._client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://blobs.test", headers=store._client.headers
    )
    await store.delete(REF)
    assert seen["auth"] == "Bearer secret"


async def test_in_memory_store_lifecycle():
    store = InMemoryBlobStore()
    upload_url = await store.generate_upload_url()
    assert "token=" in upload_url
    assert await store.get_url(REF) is None
    store.put(REF, b"receipt")
    assert await store.get_url(REF) == f"memory://blobs/objects/{REF}"
    assert await store.delete(REF) is True
    assert await store.delete(REF) is False


def test_build_blob_store_backends():
    assert isinstance(build_blob_store(AppSettings(BLOB_STORE_BACKEND="memory")), InMemoryBlobStore)
    http_store = build_blob_store(AppSettings(BLOB_STORE_BACKEND="http", BLOB_STORE_URL="http://x"))
    assert isinstance(http_store, HttpBlobStore)
    assert isinstance(http_store, BlobStore)
