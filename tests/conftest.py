import asyncio
import os
import tempfile
from pathlib import Path

import pytest

# Settings are read at import time, so the environment must be ready first.
_DB_PATH = Path(tempfile.mkdtemp()) / "leadhub-test.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["JWT_SECRET"] = "test-secret-key-not-for-production"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402

from leadhub.db.models import Lead  # noqa: E402
from leadhub.db.session import async_session  # noqa: E402
from leadhub.main import app  # noqa: E402
from leadhub.services import scoring  # noqa: E402

VALID_LEAD = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "(555) 123-4567",
    "service_type": "hvac",
    "message": "Furnace is making a loud noise",
    "source": "google",
}


@pytest.fixture
def client():
    """App client over a fresh database file."""
    _DB_PATH.unlink(missing_ok=True)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def valid_lead():
    return dict(VALID_LEAD)


@pytest.fixture
def register_provider(client):
    """Registers a provider account and returns the auth response body."""

    def _register(email="owner@acme-plumbing.com", password="secret123"):
        r = client.post(
            "/api/auth/provider/register",
            json={
                "business_name": "Acme Plumbing",
                "owner_name": "Pat Owner",
                "email": email,
                "password": password,
                "phone": "5551234567",
                "service_types": ["plumbing", "hvac"],
            },
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _register


@pytest.fixture
def register_customer(client):
    def _register(email="homeowner@example.com", password="secret123"):
        r = client.post(
            "/api/auth/customer/register",
            json={"name": "Sam Home", "email": email, "password": password, "phone": "5559876543"},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _register


@pytest.fixture
def provider(register_provider):
    return register_provider()


@pytest.fixture
def auth_headers(provider):
    return {"Authorization": f"Bearer {provider['token']}"}


@pytest.fixture
def make_lead(client, valid_lead):
    def _make(**overrides):
        r = client.post("/api/leads", json={**valid_lead, **overrides})
        assert r.status_code == 201, r.text
        return r.json()["lead"]

    return _make


@pytest.fixture
def no_behavior_signals(monkeypatch):
    """Make every random draw miss, so scores only reflect stored attributes."""

    class Miss:
        def random(self):
            return 0.99

    monkeypatch.setattr(scoring, "_system_random", Miss())


@pytest.fixture
def backdate(client):
    """Writes fields straight to a lead row, bypassing the API."""

    def _backdate(lead_id, **fields):
        async def _update():
            async with async_session() as session:
                lead = await session.get(Lead, lead_id)
                for key, value in fields.items():
                    setattr(lead, key, value)
                await session.commit()

        asyncio.run(_update())

    return _backdate
