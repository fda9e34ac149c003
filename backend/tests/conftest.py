# tests/conftest.py
import os

# in-process store and HS256 tokens for the whole test session
os.environ["STORE_BACKEND"] = "memory"
os.environ["AUTH_PROVIDER"] = "jwt"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

from bloodbridge.core.security import create_token
from bloodbridge.deps import get_gateway
from bloodbridge.main import app
from bloodbridge.services.payments import PaymentError

class FakeGateway:
    def __init__(self):
        self.calls = []
        self.fail = False

    async def create_payment_intent(self, amount_minor: int) -> str:
        self.calls.append(amount_minor)
        if self.fail:
            raise PaymentError("card_declined")
        return f"pi_test_{amount_minor}_secret"

def auth_headers(email: str, uid: str = "uid-1") -> dict:
    tok = create_token({"sub": uid, "email": email})
    return {"Authorization": f"Bearer {tok}"}

@pytest.fixture(scope="session")
def anyio_backend():
    # keep AnyIO on asyncio for the whole test session
    return "asyncio"

@pytest.fixture
def gateway():
    return FakeGateway()

@pytest.fixture
async def test_client(gateway):
    # fresh lifespan (and so a fresh in-memory store) per test
    app.dependency_overrides[get_gateway] = lambda: gateway
    async with LifespanManager(app):
        transport = ASGITransport(app=app, raise_app_exceptions=True)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()

@pytest.fixture
def repo(test_client):
    return app.state.repo

async def _register(ac: AsyncClient, email: str, uid: str) -> dict:
    r = await ac.post("/users", json={"uid": uid, "email": email, "name": email.split("@")[0]})
    assert r.status_code == 201, r.text
    return r.json()["user"]

@pytest.fixture
async def donor(test_client):
    user = await _register(test_client, "donor@example.com", "uid-donor")
    return {"user": user, "headers": auth_headers(user["email"], user["uid"])}

@pytest.fixture
async def admin(test_client, repo):
    user = await _register(test_client, "admin@example.com", "uid-admin")
    await repo.update_user_by_email(user["email"], {"role": "admin"})
    return {"user": user, "headers": auth_headers(user["email"], user["uid"])}
