"""End-to-end tests for the customer and property endpoints (memory backend)."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from brokerbook.config import Settings
from brokerbook.main import create_app

EKO = {"X-Tenant-Handle": "eko", "X-Tenant-Role": "user"}
RINA = {"X-Tenant-Handle": "rina", "X-Tenant-Role": "paid_user"}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        storage_backend="memory",
        upload_dir=str(tmp_path / "uploads"),
        public_base_url="http://test/uploads",
        max_upload_size_mb=1,
    )


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[AsyncClient]:
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ── Authentication boundary ─────────────────────────────────────────


@pytest.mark.asyncio
async def test_missing_tenant_header_is_401(client: AsyncClient):
    response = await client.get("/api/v1/customers")

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Authentication required"}


@pytest.mark.asyncio
async def test_admin_role_may_not_access_records(client: AsyncClient):
    response = await client.get(
        "/api/v1/customers", headers={"X-Tenant-Handle": "eko", "X-Tenant-Role": "admin"}
    )

    assert response.status_code == 403
    assert response.json()["success"] is False


# ── Customers ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_customer_with_defaults(client: AsyncClient):
    response = await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    customer = body["customer"]
    assert customer["id"] == "eko-1"
    assert customer["createdBy"] == "eko"
    assert customer["status"] is None
    assert customer["effectiveStatus"] == "Active"
    assert customer["carData"] == {
        "ownerName": "",
        "carBrand": "",
        "carModel": "",
        "plateNumber": "",
        "chassisNumber": "",
        "engineNumber": "",
        "dueDate": None,
        "carPrice": 0,
    }
    assert customer["documentStatus"] == {"hasSTNK": False, "hasSIM": False, "hasKTP": False}
    assert customer["documentPhotos"] == {"stnk": "", "sim": "", "ktp": ""}


@pytest.mark.asyncio
async def test_create_customer_without_name_is_400(client: AsyncClient):
    response = await client.post("/api/v1/customers", json={"phone": "0812"}, headers=EKO)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["field"] == "name"


@pytest.mark.asyncio
async def test_unknown_section_field_is_400(client: AsyncClient):
    response = await client.post(
        "/api/v1/customers", json={"name": "Budi", "carData": {"wheels": 4}}, headers=EKO
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_partial_nested_update(client: AsyncClient):
    await client.post(
        "/api/v1/customers",
        json={"name": "Budi", "carData": {"carBrand": "Toyota"}},
        headers=EKO,
    )

    response = await client.put(
        "/api/v1/customers/eko-1", json={"carData": {"plateNumber": "B123"}}, headers=EKO
    )

    assert response.status_code == 200
    car_data = response.json()["customer"]["carData"]
    assert car_data["plateNumber"] == "B123"
    assert car_data["carBrand"] == "Toyota"


@pytest.mark.asyncio
async def test_status_cancel_then_reset_with_null(client: AsyncClient):
    await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    cancelled = await client.put(
        "/api/v1/customers/eko-1", json={"status": "Cancelled"}, headers=EKO
    )
    assert cancelled.json()["customer"]["status"] == "Cancelled"

    reset = await client.put("/api/v1/customers/eko-1", json={"status": None}, headers=EKO)
    assert reset.json()["customer"]["status"] is None
    assert reset.json()["customer"]["effectiveStatus"] == "Active"


@pytest.mark.asyncio
async def test_invalid_status_is_400(client: AsyncClient):
    await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    response = await client.put(
        "/api/v1/customers/eko-1", json={"status": "Expired"}, headers=EKO
    )

    assert response.status_code == 400
    assert response.json()["field"] == "status"


@pytest.mark.asyncio
async def test_cross_tenant_access_is_403(client: AsyncClient):
    await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    get = await client.get("/api/v1/customers/eko-1", headers=RINA)
    delete = await client.delete("/api/v1/customers/eko-1", headers=RINA)
    missing = await client.get("/api/v1/customers/eko-99", headers=RINA)

    assert get.status_code == 403
    assert get.json() == {"success": False, "error": "Access denied to this customer"}
    assert delete.status_code == 403
    assert missing.status_code == 403


@pytest.mark.asyncio
async def test_missing_and_malformed_ids(client: AsyncClient):
    missing = await client.get("/api/v1/customers/eko-5", headers=EKO)
    malformed = await client.get("/api/v1/customers/eko", headers=EKO)

    assert missing.status_code == 404
    assert malformed.status_code == 400


@pytest.mark.asyncio
async def test_list_search_stats_and_delete(client: AsyncClient):
    for name, plate in (("Budi", "B 1"), ("Sari", "D 2"), ("Andi", "B 3")):
        await client.post(
            "/api/v1/customers",
            json={"name": name, "carData": {"plateNumber": plate}},
            headers=EKO,
        )
    await client.post("/api/v1/customers", json={"name": "Budiman"}, headers=RINA)

    listing = (await client.get("/api/v1/customers", headers=EKO)).json()
    assert [c["id"] for c in listing["customers"]] == ["eko-1", "eko-2", "eko-3"]
    assert listing["count"] == 3

    search = (await client.get("/api/v1/customers/search", params={"q": "b "}, headers=EKO)).json()
    assert [c["name"] for c in search["customers"]] == ["Budi", "Andi"]

    blank = await client.get("/api/v1/customers/search", params={"q": " "}, headers=EKO)
    assert blank.status_code == 400

    deleted = await client.delete("/api/v1/customers/eko-3", headers=EKO)
    assert deleted.json() == {"success": True, "message": "Customer deleted"}

    stats = (await client.get("/api/v1/customers/stats", headers=EKO)).json()
    assert stats["stats"] == {"total": 2, "currentCounter": 3, "nextId": "eko-4"}

    created = await client.post("/api/v1/customers", json={"name": "Dian"}, headers=EKO)
    assert created.json()["customer"]["id"] == "eko-4"


@pytest.mark.asyncio
async def test_sweep_and_status_listing(client: AsyncClient):
    await client.post(
        "/api/v1/customers",
        json={"name": "Overdue", "carData": {"dueDate": 1_000}},
        headers=EKO,
    )
    await client.post("/api/v1/customers", json={"name": "Fresh"}, headers=EKO)

    expired_view = (await client.get("/api/v1/customers/status/Expired", headers=EKO)).json()
    assert [c["name"] for c in expired_view["customers"]] == ["Overdue"]

    first = (await client.post("/api/v1/customers/sweep-expired", headers=EKO)).json()
    second = (await client.post("/api/v1/customers/sweep-expired", headers=EKO)).json()
    assert first == {"success": True, "expired": 1}
    assert second == {"success": True, "expired": 0}

    overdue = (await client.get("/api/v1/customers/eko-1", headers=EKO)).json()["customer"]
    assert overdue["status"] == "Expired"

    bad = await client.get("/api/v1/customers/status/Pending", headers=EKO)
    assert bad.status_code == 400


# ── Uploads ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_upload_car_photos(client: AsyncClient, settings: Settings):
    await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    response = await client.post(
        "/api/v1/customers/eko-1/files/carPhotos",
        files={"leftSide": ("left.png", b"\x89PNG-left", "image/png")},
        headers=EKO,
    )

    assert response.status_code == 200
    body = response.json()
    url = body["files"]["leftSide"]
    assert url == "http://test/uploads/customers/eko-1/eko-1_left_side.png"
    assert body["customer"]["carPhotos"]["leftSide"] == url
    assert body["customer"]["carPhotos"]["front"] == ""

    stored = await client.get("/uploads/customers/eko-1/eko-1_left_side.png")
    assert stored.status_code == 200
    assert stored.content == b"\x89PNG-left"


@pytest.mark.asyncio
async def test_upload_rejects_non_image_for_photos(client: AsyncClient):
    await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    response = await client.post(
        "/api/v1/customers/eko-1/files/carPhotos",
        files={"front": ("front.pdf", b"%PDF-1.7", "application/pdf")},
        headers=EKO,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_upload_accepts_pdf_for_documents(client: AsyncClient):
    await client.post("/api/v1/properties", json={"ownerName": "Dewi"}, headers=EKO)

    response = await client.post(
        "/api/v1/properties/eko-1/files/documents",
        files={"certificate": ("shm.pdf", b"%PDF-1.7", "application/pdf")},
        headers=EKO,
    )

    assert response.status_code == 200
    assert response.json()["property"]["documents"]["certificate"].endswith(
        "eko-1_certificate.pdf"
    )


@pytest.mark.asyncio
async def test_upload_rejects_oversized_file(client: AsyncClient):
    await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    response = await client.post(
        "/api/v1/customers/eko-1/files/carPhotos",
        files={"front": ("big.jpg", b"0" * (1024 * 1024 + 1), "image/jpeg")},
        headers=EKO,
    )

    assert response.status_code == 400
    record = await client.get("/api/v1/customers/eko-1", headers=EKO)
    assert record.json()["customer"]["carPhotos"]["front"] == ""


@pytest.mark.asyncio
async def test_upload_accepts_file_at_size_limit(client: AsyncClient):
    await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    response = await client.post(
        "/api/v1/customers/eko-1/files/carPhotos",
        files={"front": ("exact.jpg", b"0" * (1024 * 1024), "image/jpeg")},
        headers=EKO,
    )

    assert response.status_code == 200
    assert "eko-1_front" in response.json()["files"]["front"]


@pytest.mark.asyncio
async def test_upload_to_other_tenants_record_is_403(
client: AsyncClient):
    await client.post("/api/v1/customers", json={"name": "Budi"}, headers=EKO)

    response = await client.post(
        "/api/v1/customers/eko-1/files/carPhotos",
        files={"front": ("front.png", b"png", "image/png")},
        headers=RINA,
    )

    assert response.status_code == 403


# ── Properties ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_property_lifecycle(client: AsyncClient):
    created = await client.post(
        "/api/v1/properties",
        json={
            "ownerName": "Dewi",
            "status": "Active",
            "propertyData": {"city": "Bandung"},
            "insuranceData": {"policyNumber": "POL-1", "endDate": 1_000},
        },
        headers=EKO,
    )
    assert created.status_code == 201
    prop = created.json()["property"]
    assert prop["id"] == "eko-1"
    assert prop["status"] == "Active"
    assert prop["propertyData"]["city"] == "Bandung"
    assert prop["propertyData"]["province"] == ""
    assert prop["propertyPhotos"]["interior4"] == ""

    customers = (await client.get("/api/v1/customers/stats", headers=EKO)).json()
    assert customers["stats"]["currentCounter"] == 0

    swept = (await client.post("/api/v1/properties/sweep-expired", headers=EKO)).json()
    assert swept["expired"] == 1

    found = (await client.get("/api/v1/properties/search", params={"q": "bandung"}, headers=EKO)).json()
    assert [p["status"] for p in found["properties"]] == ["Expired"]

    reactivated = await client.put(
        "/api/v1/properties/eko-1",
        json={"status": "Active", "insuranceData": {"endDate": None}},
        headers=EKO,
    )
    body = reactivated.json()["property"]
    assert body["status"] == "Active"
    assert body["insuranceData"]["endDate"] is None
    assert body["insuranceData"]["policyNumber"] == "POL-1"
