"""API tests for authentication, admin registration and /me."""

from httpx import AsyncClient


async def test_missing_token_is_401(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/me")
    assert resp.status_code == 401
    assert resp.json()["error"] == "MISSING_CREDENTIAL"
    assert resp.headers["www-authenticate"] == "Bearer"


async def test_unknown_token_is_invalid(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/me", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "INVALID_CREDENTIAL"


async def test_me_creates_staff_user_once(client: AsyncClient, verifier) -> None:
    headers = verifier.register("tok-u1", "u1", "u1@example.com")

    first = await client.get("/api/v1/me", headers=headers)
    second = await client.get("/api/v1/me", headers=headers)

    assert first.status_code == 200
    body = first.json()
    assert body["kind"] == "user"
    assert body["role"] == "staff"
    assert body["owner_id"] == "u1"
    assert second.json()["user"]["created_at"] == body["user"]["created_at"]


async def test_register_admin_then_admin_routes_open(client: AsyncClient, verifier) -> None:
    headers = verifier.register("tok-u1", "u1", "u1@example.com")
    assert (await client.get("/api/v1/employees", headers=headers)).status_code == 403

    resp = await client.post("/api/v1/auth/register-admin", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"

    assert (await client.get("/api/v1/employees", headers=headers)).status_code == 200


async def test_employee_cannot_register_admin(client: AsyncClient, make_admin, make_employee) -> None:
    admin = await make_admin()
    _, emp_headers = await make_employee(admin, "e1")
    resp = await client.post("/api/v1/auth/register-admin", headers=emp_headers)
    assert resp.status_code == 403


async def test_me_for_employee(client: AsyncClient, make_admin, make_employee) -> None:
    admin = await make_admin()
    _, emp_headers = await make_employee(admin, "e1", name="Ann")
    body = (await client.get("/api/v1/me", headers=emp_headers)).json()
    assert body["kind"] == "employee"
    assert body["owner_id"] == "admin-1"
    assert body["employee"]["name"] == "Ann"
