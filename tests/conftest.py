"""Pytest configuration and fixtures for sopdesk.

Required settings are set in the environment before sopdesk.main is
imported. HTTP tests run against the app through ASGITransport (lifespan
does not run); capabilities backed by an in-memory Firestore double and a
fake token verifier are installed on app.state per test.
"""

import os

os.environ.setdefault("FIREBASE_PROJECT_ID", "test-project")
os.environ.setdefault("FIREBASE_SERVICE_ACCOUNT_KEY", '{"project_id": "test-project"}')

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from sopdesk.core.capabilities import Capabilities, build_event_bus  # noqa: E402
from sopdesk.core.config import get_settings  # noqa: E402
from sopdesk.core.limiter import limiter  # noqa: E402
from sopdesk.domain.enums import UserRole  # noqa: E402
from sopdesk.infrastructure.firebase.repositories import (  # noqa: E402
    FirestoreEmployeeRepository,
    FirestoreProgressRepository,
    FirestoreSettingsRepository,
    FirestoreSopRepository,
    FirestoreSubscriptionRepository,
    FirestoreSystemLogRepository,
    FirestoreTrainingRepository,
    FirestoreUserRepository,
)
from sopdesk.main import app  # noqa: E402
from tests.fakes import FakeFirestore, FakeVerifier  # noqa: E402


@pytest.fixture
def store() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
def caps(store: FakeFirestore, verifier: FakeVerifier) -> Capabilities:
    """Capabilities over the in-memory store; optional integrations unset."""
    system_logs = FirestoreSystemLogRepository(store)
    return Capabilities(
        verifier=verifier,
        users=FirestoreUserRepository(store),
        employees=FirestoreEmployeeRepository(store),
        sops=FirestoreSopRepository(store),
        trainings=FirestoreTrainingRepository(store),
        progress=FirestoreProgressRepository(store),
        subscriptions=FirestoreSubscriptionRepository(store),
        settings=FirestoreSettingsRepository(store),
        system_logs=system_logs,
        events=build_event_bus(system_logs),
    )


@pytest.fixture
async def client(caps: Capabilities) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with test capabilities installed."""
    get_settings.cache_clear()
    limiter.reset()
    app.state.capabilities = caps
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.capabilities = None


@pytest.fixture
def make_admin(caps: Capabilities, verifier: FakeVerifier):
    """Return an async factory: create an admin user and return its auth headers."""

    async def _make(subject_id: str = "admin-1", email: str | None = None) -> dict[str, str]:
        email = email or f"{subject_id}@example.com"
        await caps.users.set_role(subject_id, email, UserRole.ADMIN)
        return verifier.register(f"token-{subject_id}", subject_id, email)

    return _make


@pytest.fixture
def make_employee(client: AsyncClient, verifier: FakeVerifier):
    """Return an async factory: create an employee via the API and return (record, headers)."""

    async def _make(
        admin_headers: dict[str, str],
        subject_id: str,
        name: str = "Emp",
        department: str = "Ops",
    ) -> tuple[dict, dict[str, str]]:
        email = f"{subject_id}@example.com"
        resp = await client.post(
            "/api/v1/employees",
            json={
                "name": name,
                "email": email,
                "department": department,
                "subject_id": subject_id,
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json(), verifier.register(f"token-{subject_id}", subject_id, email)

    return _make
