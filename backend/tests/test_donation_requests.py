import pytest
from bson import ObjectId
from httpx import AsyncClient

pytestmark = pytest.mark.anyio

def _payload(**over):
    body = {
        "requesterName": "Rahim",
        "requesterEmail": "donor@example.com",
        "recipientName": "Karim",
        "recipientDistrict": "Dhaka",
        "recipientUpazila": "Savar",
        "hospitalName": "Dhaka Medical",
        "fullAddress": "Ward 3",
        "bloodGroup": "A+",
        "donationDate": "2026-11-01",
        "donationTime": "10:30",
        "requestMessage": "Urgent",
    }
    body.update(over)
    return body

async def _create(ac: AsyncClient, **over) -> str:
    r = await ac.post("/donation-requests", json=_payload(**over))
    assert r.status_code == 200, r.text
    return r.json()["insertedId"]

async def test_create_forces_pending_and_server_time(test_client: AsyncClient, repo):
    rid = await _create(test_client, status="done", createdAt="1999-01-01T00:00:00Z")
    doc = await repo.get_request(ObjectId(rid))
    assert doc["status"] == "pending"
    assert doc["createdAt"].year != 1999

    r = await test_client.get(f"/donation-requests/{rid}")
    assert r.status_code == 200
    assert r.json()["status"] == "pending"
    assert r.json()["recipientName"] == "Karim"

async def test_create_rejects_unknown_fields(test_client: AsyncClient):
    r = await test_client.post("/donation-requests", json=_payload(isAdmin=True))
    assert r.status_code == 400

async def test_list_requires_token_and_filters(test_client: AsyncClient, donor):
    first = await _create(test_client)
    await _create(test_client, requesterEmail="other@example.com")
    last = await _create(test_client)

    assert (await test_client.get("/donation-requests")).status_code == 401

    r = await test_client.get("/donation-requests", headers=donor["headers"])
    assert len(r.json()) == 3

    r = await test_client.get("/donation-requests", params={"email": "donor@example.com"}, headers=donor["headers"])
    assert [d["id"] for d in r.json()] == [last, first]

async def test_list_by_user_is_public_and_newest_first(test_client: AsyncClient):
    ids = [await _create(test_client) for _ in range(3)]
    r = await test_client.get("/donation-requests/user/donor@example.com")
    assert r.status_code == 200
    assert [d["id"] for d in r.json()] == list(reversed(ids))

async def test_get_validates_id(test_client: AsyncClient):
    assert (await test_client.get("/donation-requests/xyz")).status_code == 400
    assert (await test_client.get(f"/donation-requests/{ObjectId()}")).status_code == 404

async def test_patch_partial(test_client: AsyncClient, repo):
    rid = await _create(test_client)
    r = await test_client.patch(
        f"/donation-requests/{rid}",
        json={"status": "inprogress", "donorName": "Selim", "donorEmail": "selim@example.com"},
    )
    assert r.status_code == 200
    assert r.json()["matchedCount"] == 1
    doc = await repo.get_request(ObjectId(rid))
    assert (doc["status"], doc["donorName"], doc["hospitalName"]) == ("inprogress", "Selim", "Dhaka Medical")

    assert (await test_client.patch(f"/donation-requests/{rid}", json={})).status_code == 400
    assert (await test_client.patch(f"/donation-requests/{rid}", json={"status": "lost"})).status_code == 400
    assert (await test_client.patch("/donation-requests/bad", json={"status": "done"})).status_code == 400
    r = await test_client.patch(f"/donation-requests/{ObjectId()}", json={"status": "done"})
    assert r.status_code == 404

async def test_put_rewrites_editable_fields(test_client: AsyncClient, repo):
    rid = await _create(test_client)
    before = await repo.get_request(ObjectId(rid))

    body = {"requesterEmail": "donor@example.com", "recipientName": "Nadia", "bloodGroup": "B-"}
    r = await test_client.put(f"/donation-requests/{rid}", json=body)
    assert r.status_code == 200

    doc = await repo.get_request(ObjectId(rid))
    assert doc["recipientName"] == "Nadia"
    assert doc["hospitalName"] is None
    assert doc["status"] == "pending"
    assert doc["createdAt"] == before["createdAt"]

    r = await test_client.put(f"/donation-requests/{ObjectId()}", json=body)
    assert r.status_code == 404
    r = await test_client.put(f"/donation-requests/{rid}", json={"recipientName": "Nadia"})
    assert r.status_code == 400

async def test_status_route(test_client: AsyncClient, donor):
    rid = await _create(test_client)
    url = f"/donation-requests/status/{rid}"

    assert (await test_client.patch(url, json={"status": "done"})).status_code == 401
    assert (await test_client.patch(url, json={}, headers=donor["headers"])).status_code == 400

    r = await test_client.patch(url, json={"status": "done"}, headers=donor["headers"])
    assert r.status_code == 200
    assert r.json()["success"] is True

    # already "done": reported like a missing request
    r = await test_client.patch(url, json={"status": "done"}, headers=donor["headers"])
    assert r.status_code == 404

    r = await test_client.patch(
        f"/donation-requests/status/{ObjectId()}", json={"status": "done"}, headers=donor["headers"]
    )
    assert r.status_code == 404

async def test_delete_removes_only_target(test_client: AsyncClient, repo):
    keep = await _create(test_client)
    gone = await _create(test_client)

    r = await test_client.delete(f"/donation-requests/{gone}")
    assert r.status_code == 200
    assert r.json()["result"]["deletedCount"] == 1

    assert await repo.count_requests() == 1
    assert await repo.get_request(ObjectId(keep)) is not None

    r = await test_client.delete(f"/donation-requests/{gone}")
    assert r.status_code == 404
