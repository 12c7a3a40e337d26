"""End-to-end application workflow tests over HTTP."""

import json

import pytest
from httpx import AsyncClient

from app.routers.v1 import applications as applications_router
from tests.helpers import TEST_PASSWORD, make_account, stored_files

PAYLOAD = {"projectName": "Metro Line Ext", "companyExperience": "5 years"}


async def _login(client: AsyncClient, email: str) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['accessToken']}"}


@pytest.fixture
async def vendor_x(app, client):
    await make_account(app.state.db, "x@vendor.in", "9000000011", company="X Constructions")
    return await _login(client, "x@vendor.in")


@pytest.fixture
async def vendor_y(app, client):
    await make_account(app.state.db, "y@vendor.in", "9000000012", company="Y Electricals")
    return await _login(client, "y@vendor.in")


@pytest.fixture
async def official(app, client):
    await make_account(app.state.db, "hod@metro.gov.in", "9000000013", official=True, title="HOD")
    return await _login(client, "hod@metro.gov.in")


async def _submit(client, headers, department="civil", payload=PAYLOAD, files=None):
    if files is None:
        files = [
            ("documents", ("registration.pdf", b"%PDF-1.4 reg", "application/pdf")),
            ("documents", ("gst.pdf", b"%PDF-1.4 gst", "application/pdf")),
        ]
    return await client.post(
        "/api/v1/applications",
        headers=headers,
        data={"department": department, "formData": json.dumps(payload)},
        files=files,
    )


async def test_submit_and_read_back(client, settings, vendor_x) -> None:
    response = await _submit(client, vendor_x)
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["status"] == "PendingVerification"
    assert data["documentCount"] == 2

    detail = await client.get(f"/api/v1/applications/{data['applicationId']}", headers=vendor_x)
    assert detail.status_code == 200
    body = detail.json()["data"]
    assert body["department"] == "civil"
    assert body["formData"]["projectName"] == "Metro Line Ext"
    assert body["companyName"] == "X Constructions"
    assert body["vendorUniqueId"].startswith("VEN-")
    assert [d["fileName"] for d in body["documents"]] == ["registration.pdf", "gst.pdf"]
    assert body["documents"][0]["fileUrl"].startswith("http://testserver/api/v1/applications/")
    assert len(stored_files(settings.upload_dir)) == 2


async def test_download_document(client, vendor_x, vendor_y) -> None:
    app_id = (await _submit(client, vendor_x)).json()["data"]["applicationId"]
    detail = (await client.get(f"/api/v1/applications/{app_id}", headers=vendor_x)).json()
    doc = detail["data"]["documents"][0]
    path = doc["fileUrl"].removeprefix("http://testserver")

    own = await client.get(path, headers=vendor_x)
    assert own.status_code == 200
    assert own.content == b"%PDF-1.4 reg"
    assert own.headers["content-type"] == "application/pdf"

    foreign = await client.get(path, headers=vendor_y)
    assert foreign.status_code == 404


async def test_submission_requires_documents(client, settings, vendor_x) -> None:
    response = await client.post(
        "/api/v1/applications",
        headers=vendor_x,
        data={"department": "civil", "formData": json.dumps(PAYLOAD)},
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_submission_rejects_unknown_department(client, settings, vendor_x) -> None:
    response = await _submit(client, vendor_x, department="aerospace")
    assert response.status_code == 422
    assert "Unknown department" in response.json()["error"]["message"]
    assert stored_files(settings.upload_dir) == []


async def test_submission_rejects_unsupported_file(client, settings, vendor_x) -> None:
    response = await _submit(
        client, vendor_x, files=[("documents", ("run.exe", b"MZ", "application/octet-stream"))]
    )
    assert response.status_code == 415
    assert response.json()["error"]["code"] == "UNSUPPORTED_MEDIA_TYPE"


async def test_submission_rejects_more_than_five_files(
    client, settings, vendor_x, monkeypatch
) -> None:
    read = []
    real_read = applications_router._read_upload

    async def recording_read(file, settings):
        read.append(file.filename)
        return await real_read(file, settings)

    monkeypatch.setattr(applications_router, "_read_upload", recording_read)
    files = [("documents", (f"doc{i}.pdf", b"%PDF", "application/pdf")) for i in range(6)]
    response = await _submit(client, vendor_x, files=files)
    assert response.status_code == 422
    assert "At most 5 documents" in response.json()["error"]["message"]
    # Rejected on count alone, before any upload is read
    assert read == []
    assert stored_files(settings.upload_dir) == []


async def test_vendor_cannot_read_other_vendors_application(client, vendor_x, vendor_y) -> None:
    app_id = (await _submit(client, vendor_y)).json()["data"]["applicationId"]

    response = await client.get(f"/api/v1/applications/{app_id}", headers=vendor_x)
    assert response.status_code == 404
    assert response.json() == {
        "error": {"code": "NOT_FOUND", "message": f"Application '{app_id}' not found"}
    }
    own = (await client.get("/api/v1/applications/mine", headers=vendor_x)).json()["data"]
    assert own == []


async def test_list_mine_newest_first(client, vendor_x) -> None:
    first = (await _submit(client, vendor_x, "civil")).json()["data"]["applicationId"]
    second = (await _submit(client, vendor_x, "mechanical")).json()["data"]["applicationId"]

    rows = (await client.get("/api/v1/applications/mine", headers=vendor_x)).json()["data"]
    assert [r["id"] for r in rows] == [second, first]
    assert rows[0]["status"] == "PendingVerification"
    assert "companyName" not in rows[0]


async def test_official_lists_everything(client, vendor_x, vendor_y, official) -> None:
    x_id = (await _submit(client, vendor_x)).json()["data"]["applicationId"]
    y_id = (await _submit(client, vendor_y, "electrical")).json()["data"]["applicationId"]

    rows = (await client.get("/api/v1/official/applications", headers=official)).json()["data"]
    assert [r["id"] for r in rows] == [y_id, x_id]
    assert [r["companyName"] for r in rows] == ["Y Electricals", "X Constructions"]

    forbidden = await client.get("/api/v1/official/applications", headers=vendor_x)
    assert forbidden.status_code == 403
    assert forbidden.json()["error"]["code"] == "FORBIDDEN"


async def test_official_rejects_and_owner_sees_reason(client, vendor_x, official) -> None:
    app_id = (await _submit(client, vendor_x)).json()["data"]["applicationId"]

    response = await client.put(
        f"/api/v1/official/applications/{app_id}/status",
        headers=official,
        json={"status": "Rejected", "rejectionReason": "Incomplete documents"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Application status updated to Rejected"

    detail = (await client.get(f"/api/v1/applications/{app_id}", headers=vendor_x)).json()
    assert detail["data"]["status"] == "Rejected"
    assert detail["data"]["rejectionReason"] == "Incomplete documents"


@pytest.mark.parametrize(
    "body",
    [
        {"status": "Approved"},
        {"status": "Bogus"},
        {},
        {"status": 5},
        {"status": "Rejected", "rejectionReason": "x" * 3000},
        None,
    ],
    ids=["approved", "unknown", "empty", "non-string", "long-reason", "no-body"],
)
async def test_vendor_cannot_change_status(client, vendor_x, body) -> None:
    app_id = (await _submit(client, vendor_x)).json()["data"]["applicationId"]
    response = await client.put(
        f"/api/v1/official/applications/{app_id}/status", headers=vendor_x, json=body
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"

    detail = (await client.get(f"/api/v1/applications/{app_id}", headers=vendor_x)).json()
    assert detail["data"]["status"] == "PendingVerification"


async def test_invalid_status_value(client, vendor_x, official) -> None:
    app_id = (await _submit(client, vendor_x)).json()["data"]["applicationId"]
    response = await client.put(
        f"/api/v1/official/applications/{app_id}/status",
        headers=official,
        json={"status": "Pending Verification"},
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_status_change_on_missing_application(client, official) -> None:
    response = await client.put(
        "/api/v1/official/applications/404/status", headers=official, json={"status": "Approved"}
    )
    assert response.status_code == 404
