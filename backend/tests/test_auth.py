import pytest
from bson import ObjectId
from httpx import AsyncClient

from bloodbridge.core.config import settings
from bloodbridge.core.security import create_token

from conftest import auth_headers

pytestmark = pytest.mark.anyio

async def test_missing_header_is_401(test_client: AsyncClient):
    r = await test_client.get("/users")
    assert r.status_code == 401
    assert r.json()["detail"] == "Unauthorized: No token provided"

async def test_non_bearer_header_is_401(test_client: AsyncClient):
    r = await test_client.get("/users", headers={"Authorization": "Token abc"})
    assert r.status_code == 401

async def test_bad_signature_is_401(test_client: AsyncClient):
    r = await test_client.get("/users", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Unauthorized: Invalid token"

async def test_expired_token_is_401(test_client: AsyncClient):
    tok = create_token({"sub": "u1", "email": "donor@example.com"}, minutes=-5)
    r = await test_client.get("/users", headers={"Authorization": f"Bearer {tok}"})
    assert r.status_code == 401

async def test_admin_route_ladder(test_client: AsyncClient, donor, admin):
    r = await test_client.get("/admin-stats")
    assert r.status_code == 401

    r = await test_client.get("/admin-stats", headers=donor["headers"])
    assert r.status_code == 403

    r = await test_client.get("/admin-stats", headers=admin["headers"])
    assert r.status_code == 200, r.text

async def test_admin_route_unknown_user_is_403(test_client: AsyncClient):
    r = await test_client.get("/admin-stats", headers=auth_headers("ghost@example.com"))
    assert r.status_code == 403

async def test_admin_route_token_without_email_is_403(test_client: AsyncClient):
    tok = create_token({"sub": "phone-only-user"})
    r = await test_client.get("/admin-stats", headers={"Authorization": f"Bearer {tok}"})
    assert r.status_code == 403
    assert r.json()["detail"] == "No email found in token"

async def test_admin_decision_is_not_cached(test_client: AsyncClient, repo, donor):
    r = await test_client.get("/admin-stats", headers=donor["headers"])
    assert r.status_code == 403

    await repo.update_user_by_email(donor["user"]["email"], {"role": "admin"})
    r = await test_client.get("/admin-stats", headers=donor["headers"])
    assert r.status_code == 200

    await repo.update_user_by_email(donor["user"]["email"], {"role": "volunteer"})
    r = await test_client.get("/admin-stats", headers=donor["headers"])
    assert r.status_code == 403

async def test_public_routes_ignore_bad_tokens(test_client: AsyncClient):
    r = await test_client.get("/blogs", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 200

async def test_id_mutations_open_by_default(test_client: AsyncClient, donor):
    r = await test_client.patch(f"/users/role/{donor['user']['id']}", json={"role": "volunteer"})
    assert r.status_code == 200
    assert r.json() == {"success": True}

async def test_strict_mode_gates_id_mutations(test_client: AsyncClient, monkeypatch, donor, admin):
    monkeypatch.setattr(settings, "strict_auth", True)
    uid = donor["user"]["id"]

    r = await test_client.patch(f"/users/role/{uid}", json={"role": "admin"})
    assert r.status_code == 401
    r = await test_client.patch(f"/users/role/{uid}", json={"role": "admin"}, headers=donor["headers"])
    assert r.status_code == 403
    r = await test_client.patch(f"/users/role/{uid}", json={"role": "volunteer"}, headers=admin["headers"])
    assert r.status_code == 200

    r = await test_client.delete(f"/donation-requests/{ObjectId()}")
    assert r.status_code == 401
    r = await test_client.delete(f"/donation-requests/{ObjectId()}", headers=donor["headers"])
    assert r.status_code == 404
