"""API tests for SOPs and employee SOP completion."""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from sopdesk.domain.exceptions import UpstreamFailureException

CERT_URL = "https://certs.example.com/c/1.pdf"


async def _create_sop(client: AsyncClient, headers: dict, title: str, **extra) -> dict:
    body = {"title": title, "department": "Ops", "content": f"{title} steps", **extra}
    resp = await client.post("/api/v1/sops", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_recent_returns_latest_three(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    for title in ("S1", "S2", "S3", "S4"):
        await _create_sop(client, admin, title)

    recent = (await client.get("/api/v1/sops/recent", headers=admin)).json()

    assert [s["title"] for s in recent] == ["S4", "S3", "S2"]
    assert len((await client.get("/api/v1/sops", headers=admin)).json()) == 4


async def test_content_only_update(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    sop = await _create_sop(client, admin, "Opening")

    resp = await client.put(f"/api/v1/sops/{sop['id']}", json={"content": "New steps"}, headers=admin)

    body = resp.json()
    assert body["content"] == "New steps"
    assert body["title"] == "Opening"
    assert body["department"] == "Ops"


async def test_clear_empties_content(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    sop = await _create_sop(client, admin, "Opening")
    resp = await client.put(f"/api/v1/sops/{sop['id']}/clear", headers=admin)
    assert resp.json()["content"] == ""
    assert resp.json()["title"] == "Opening"


async def test_unknown_assignee_is_400(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    resp = await client.post(
        "/api/v1/sops",
        json={"title": "T", "department": "Ops", "content": "c", "assigned_to": ["ghost"]},
        headers=admin,
    )
    assert resp.status_code == 400
    assert resp.json()["details"] == {"field": "assigned_to"}


async def test_other_tenant_cannot_touch_sop(client: AsyncClient, make_admin) -> None:
    admin1 = await make_admin("admin-1")
    admin2 = await make_admin("admin-2")
    sop = await _create_sop(client, admin1, "Private")
    assert (await client.get(f"/api/v1/sops/{sop['id']}", headers=admin2)).status_code == 404
    assert (await client.delete(f"/api/v1/sops/{sop['id']}", headers=admin2)).status_code == 404
    assert (await client.get(f"/api/v1/sops/{sop['id']}", headers=admin1)).status_code == 200


async def test_employee_completes_assigned_sop_once(client: AsyncClient, caps, make_admin, make_employee) -> None:
    renderer = AsyncMock()
    renderer.render.return_value = CERT_URL
    caps.certificates = renderer
    admin = await make_admin()
    _, e1 = await make_employee(admin, "e1", name="Ann")
    _, e2 = await make_employee(admin, "e2", name="Bob")
    sop = await _create_sop(client, admin, "Closing", assigned_to=["e1"])

    before = (await client.get(f"/api/v1/employee/sops/{sop['id']}/progress", headers=e1)).json()
    assert before["completed"] is False

    first = await client.post(f"/api/v1/employee/sops/{sop['id']}/complete", headers=e1)
    second = await client.post(f"/api/v1/sops/{sop['id']}/complete", headers=e1)

    assert first.status_code == 200
    assert first.json()["completed"] is True
    assert first.json()["certificate_url"] == CERT_URL
    assert second.json() == first.json()
    renderer.render.assert_awaited_once()

    assert [s["id"] for s in (await client.get("/api/v1/employee/sops", headers=e1)).json()] == [sop["id"]]
    assert (await client.get("/api/v1/employee/sops", headers=e2)).json() == []
    assert (await client.post(f"/api/v1/employee/sops/{sop['id']}/complete", headers=e2)).status_code == 404

    logs = (await client.get("/api/v1/logs", headers=admin)).json()
    assert any(log["message"] == "SOP completed: Closing by Ann" for log in logs)


async def test_admin_cannot_complete(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    sop = await _create_sop(client, admin, "Closing")
    assert (await client.post(f"/api/v1/sops/{sop['id']}/complete", headers=admin)).status_code == 403


async def test_certificate_failure_is_502(client: AsyncClient, caps, make_admin, make_employee) -> None:
    renderer = AsyncMock()
    renderer.render.side_effect = UpstreamFailureException("certificates")
    caps.certificates = renderer
    admin = await make_admin()
    _, e1 = await make_employee(admin, "e1")
    sop = await _create_sop(client, admin, "Closing", assigned_to=["e1"])

    resp = await client.post(f"/api/v1/employee/sops/{sop['id']}/complete", headers=e1)

    assert resp.status_code == 502
    progress = (await client.get(f"/api/v1/employee/sops/{sop['id']}/progress", headers=e1)).json()
    assert progress["completed"] is False
