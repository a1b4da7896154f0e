import uuid

from .conftest import LOAD_FIELDS, OTHER_REF, REF


async def _create_load(client, **overrides):
    resp = await client.post("/api/v1/loads", json={**LOAD_FIELDS, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_health(client):
    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Healthy"
    assert resp.headers["X-Correlation-ID"]


async def test_correlation_id_is_echoed(client):
    resp = await client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["X-Correlation-ID"] == "abc-123"


async def test_load_crud(client):
    load = await _create_load(client)
    assert load["receipt_storage_id"] is None

    resp = await client.get(f"/api/v1/loads/{load['id']}")
    assert resp.status_code == 200
    assert resp.json()["destination_location"] == "Abuja"

    resp = await client.put(
        f"/api/v1/loads/{load['id']}", json={**LOAD_FIELDS, "destination_location": "Kano"}
    )
    assert resp.json()["destination_location"] == "Kano"

    resp = await client.get("/api/v1/loads", params={"location": "Kano"})
    assert [x["id"] for x in resp.json()] == [load["id"]]

    resp = await client.get("/api/v1/loads/today")
    assert [x["id"] for x in resp.json()] == [load["id"]]


async def test_create_load_validation_error(client):
    payload = {k: v for k, v in LOAD_FIELDS.items() if k != "weight"}
    resp = await client.post("/api/v1/loads", json=payload)
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"]["type"] == "validation_error"
    assert body["path"] == "/api/v1/loads"


async def test_missing_load_envelope(client):
    missing = uuid.uuid4()
    resp = await client.get(f"/api/v1/loads/{missing}")
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"]["type"] == "load_not_found"
    assert body["error"]["details"] == {"load_id": str(missing)}
    assert body["correlation_id"] == resp.headers["X-Correlation-ID"]


async def test_upload_then_attach_then_list(client, blob_store):
    resp = await client.post("/api/v1/receipts/upload-url")
    assert resp.status_code == 200
    target = resp.json()
    reference = target["storage_reference"]
    blob_store.put(reference, b"png")

    load = await _create_load(client)
    resp = await client.post(
        f"/api/v1/loads/{load['id']}/receipt", json={"storage_reference": target["upload_url"]}
    )
    assert resp.status_code == 200
    assert resp.json()["receipt_storage_id"] == reference

    resp = await client.post("/api/v1/receipts/download-url", json={"storage_reference": reference})
    assert resp.status_code == 200
    assert resp.json()["url"].endswith(reference)

    entries = (await client.get("/api/v1/receipts")).json()
    assert [(e["kind"], e["storage_reference"], e["load_id"]) for e in entries] == [
        ("load", reference, load["id"])
    ]


async def test_download_url_for_missing_blob(client):
    resp = await client.post("/api/v1/receipts/download-url", json={"storage_reference": REF})
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "blob_not_found"


async def test_attach_invalid_reference(client):
    load = await _create_load(client)
    resp = await client.post(
        f"/api/v1/loads/{load['id']}/receipt", json={"storage_reference": "garbage"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "invalid_reference"


async def test_save_standalone_empty_reference(client):
    resp = await client.post("/api/v1/receipts/standalone", json={"storage_reference": ""})
    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "invalid_reference"
    assert (await client.get("/api/v1/receipts")).json() == []


async def test_standalone_roundtrip_and_new(client):
    resp = await client.post(
        "/api/v1/receipts/standalone", json={"storage_reference": f"https://store/x?token={REF}"}
    )
    assert resp.status_code == 201
    saved = resp.json()
    assert saved == {"success": True, "storage_reference": REF, "receipt_id": saved["receipt_id"]}

    resp = await client.get(f"/api/v1/receipts/standalone/{saved['receipt_id']}")
    assert resp.json()["storage_reference"] == REF

    resp = await client.get("/api/v1/receipts/new", params={"since": "2000-01-01T00:00:00Z"})
    assert [e["receipt_id"] for e in resp.json()] == [saved["receipt_id"]]

    resp = await client.get("/api/v1/receipts/new", params={"since": "2999-01-01T00:00:00Z"})
    assert resp.json() == []


async def test_missing_standalone_receipt(client):
    resp = await client.get(f"/api/v1/receipts/standalone/{uuid.uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "receipt_not_found"


async def test_delete_receipt_by_reference(client, blob_store):
    blob_store.put(REF, b"png")
    load = await _create_load(client)
    await client.post(f"/api/v1/loads/{load['id']}/receipt", json={"storage_reference": REF})
    await client.post("/api/v1/receipts/standalone", json={"storage_reference": REF})
    await client.post("/api/v1/receipts/standalone", json={"storage_reference": OTHER_REF})

    resp = await client.post(
        "/api/v1/receipts/delete", json={"storage_reference": f"https://store/objects/{REF}?sig=1"}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["storage_reference"] == REF
    assert body["blob_deleted"] is True
    assert body["loads_cleared"] == [load["id"]]
    assert len(body["receipts_deleted"]) == 1
    assert body["warnings"] == []

    refs = [e["storage_reference"] for e in (await client.get("/api/v1/receipts")).json()]
    assert refs == [OTHER_REF]
    assert (await client.get(f"/api/v1/loads/{load['id']}")).json()["receipt_storage_id"] is None


async def test_delete_receipt_reports_blob_warning(client, blob_store):
    blob_store.fail_delete = True
    await client.post("/api/v1/receipts/standalone", json={"storage_reference": REF})

    resp = await client.post("/api/v1/receipts/delete", json={"storage_reference": REF})
    assert resp.status_code == 200
    body = resp.json()
    assert body["blob_deleted"] is False
    assert [w["step"] for w in body["warnings"]] == ["blob_store.delete"]
    assert (await client.get("/api/v1/receipts")).json() == []


async def test_delete_load_cascades(client, blob_store):
    blob_store.put(REF, b"png")
    load = await _create_load(client)
    await client.post(f"/api/v1/loads/{load['id']}/receipt", json={"storage_reference": REF})

    resp = await client.delete(f"/api/v1/loads/{load['id']}")
    assert resp.status_code == 200
    details = resp.json()["details"]
    assert details["blob_deleted"] is True
    assert details["warnings"] == []
    assert blob_store.delete_calls == [REF]
    assert (await client.get(f"/api/v1/loads/{load['id']}")).status_code == 404
