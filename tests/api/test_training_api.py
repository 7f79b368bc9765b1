"""API tests for training videos."""

from httpx import AsyncClient


async def _create(client: AsyncClient, headers: dict, **extra) -> dict:
    body = {"title": "Safety", "media_url": "https://media.example.com/v/1.mp4", **extra}
    resp = await client.post("/api/v1/training", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_visibility_public_and_assigned(client: AsyncClient, make_admin, make_employee) -> None:
    admin = await make_admin()
    _, e1 = await make_employee(admin, "e1")
    _, e2 = await make_employee(admin, "e2")
    public = await _create(client, admin, title="Public")
    assigned = await _create(client, admin, title="Only e1", assigned_employees=["e1"])

    e1_ids = {t["id"] for t in (await client.get("/api/v1/employee/training", headers=e1)).json()}
    e2_ids = {t["id"] for t in (await client.get("/api/v1/training", headers=e2)).json()}

    assert e1_ids == {public["id"], assigned["id"]}
    assert e2_ids == {public["id"]}
    assert (await client.get(f"/api/v1/training/{assigned['id']}", headers=e2)).status_code == 404
    assert len((await client.get("/api/v1/training", headers=admin)).json()) == 2


async def test_assigned_training_completes_after_all(client: AsyncClient, make_admin, make_employee) -> None:
    admin = await make_admin()
    _, e1 = await make_employee(admin, "e1")
    _, e2 = await make_employee(admin, "e2")
    training = await _create(client, admin, assigned_employees=["e1", "e2"])
    url = f"/api/v1/training/{training['id']}/complete"

    assert (await client.post(url, headers=e1)).json()["status"] == "active"
    done = (await client.post(url, headers=e2)).json()

    assert done["status"] == "completed"
    assert sorted(done["completed_by"]) == ["e1", "e2"]


async def test_admin_mark_complete(client: AsyncClient, make_admin, make_employee) -> None:
    admin = await make_admin()
    await make_employee(admin, "e1")
    training = await _create(client, admin, assigned_employees=["e1"])
    resp = await client.post(f"/api/v1/training/{training['id']}/mark-complete", headers=admin)
    assert resp.json()["status"] == "completed"


async def test_only_admin_creates_and_deletes(client: AsyncClient, make_admin, make_employee) -> None:
    admin = await make_admin()
    _, e1 = await make_employee(admin, "e1")
    resp = await client.post(
        "/api/v1/training", json={"title": "X", "media_url": "https://m"}, headers=e1
    )
    assert resp.status_code == 403

    training = await _create(client, admin)
    assert (await client.delete(f"/api/v1/training/{training['id']}", headers=e1)).status_code == 403
    assert (await client.delete(f"/api/v1/training/{training['id']}", headers=admin)).status_code == 204
    assert (await client.get(f"/api/v1/training/{training['id']}", headers=admin)).status_code == 404
