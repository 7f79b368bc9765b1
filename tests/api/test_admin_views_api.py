"""API tests for stats, settings and system logs."""

from httpx import AsyncClient


async def test_stats_counts(client: AsyncClient, make_admin, make_employee) -> None:
    admin = await make_admin()
    await make_employee(admin, "e1")
    await client.post(
        "/api/v1/sops",
        json={"title": "S", "department": "Ops", "content": "c", "assigned_to": ["e1"]},
        headers=admin,
    )
    await client.post(
        "/api/v1/training", json={"title": "T", "media_url": "https://m"}, headers=admin
    )

    stats = (await client.get("/api/v1/stats", headers=admin)).json()

    assert stats == {
        "employees": 1,
        "active_trainings": 1,
        "completed_trainings": 0,
        "pending_sops": 1,
    }


async def test_stats_requires_admin(client: AsyncClient, verifier) -> None:
    headers = verifier.register("tok-staff", "staff-1", "staff@example.com")
    assert (await client.get("/api/v1/stats", headers=headers)).status_code == 403


async def test_settings_defaults_and_partial_update(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    initial = (await client.get("/api/v1/settings", headers=admin)).json()
    assert initial["websocket"]["enabled"] is True

    resp = await client.put(
        "/api/v1/settings", json={"notifications": {"email_enabled": False}}, headers=admin
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["notifications"]["email_enabled"] is False
    assert body["notifications"]["training_reminders"] is True
    assert body["websocket"] == initial["websocket"]


async def test_settings_unknown_key_is_400(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    resp = await client.put("/api/v1/settings", json={"websocket": {"volume": 11}}, headers=admin)
    assert resp.status_code == 400


async def test_settings_unknown_group_is_422(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    resp = await client.put("/api/v1/settings", json={"theme": {}}, headers=admin)
    assert resp.status_code == 422


async def test_logs_newest_first_and_limited(client: AsyncClient, make_admin, make_employee) -> None:
    admin = await make_admin()
    await make_employee(admin, "e1", name="Ann")
    await make_employee(admin, "e2", name="Bob")

    logs = (await client.get("/api/v1/logs", params={"limit": 1}, headers=admin)).json()

    assert [log["message"] for log in logs] == ["Employee added: Bob"]
    assert logs[0]["type"] == "info"


async def test_logs_are_tenant_scoped(client: AsyncClient, make_admin, make_employee) -> None:
    admin1 = await make_admin("admin-1")
    admin2 = await make_admin("admin-2")
    await make_employee(admin1, "e1")
    assert (await client.get("/api/v1/logs", headers=admin2)).json() == []


async def test_logs_limit_must_be_positive(client: AsyncClient, make_admin) -> None:
    admin = await make_admin()
    assert (await client.get("/api/v1/logs", params={"limit": 0}, headers=admin)).status_code == 422
