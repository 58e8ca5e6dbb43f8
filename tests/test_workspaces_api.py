"""Workspace API tests — ownership scoping, uniqueness, ordering."""

import uuid

import pytest


async def _logged_in(make_client):
    """A fresh client with its own cookie jar and a freshly signed-up user."""
    client = await make_client()
    username = f"ws-{uuid.uuid4().hex[:8]}"
    r = await client.post(
        "/api/v1/signup", json={"username": username, "password": "pw-123"}
    )
    assert r.status_code == 200
    return client, r.json()["user_id"]


@pytest.mark.asyncio
async def test_create_workspace(make_client):
    client, user_id = await _logged_in(make_client)

    r = await client.post(
        "/api/v1/workspaces", json={"name": "Research", "description": "papers"}
    )
    assert r.status_code == 201
    ws = r.json()
    assert ws["id"] > 0
    assert ws["name"] == "Research"
    assert ws["description"] == "papers"
    assert ws["created_by"] == user_id
    assert ws["created_at"]


@pytest.mark.asyncio
async def test_create_strips_name_and_rejects_blank(make_client):
    client, _ = await _logged_in(make_client)

    r = await client.post("/api/v1/workspaces", json={"name": "  Padded  "})
    assert r.status_code == 201
    assert r.json()["name"] == "Padded"
    assert r.json()["description"] is None

    r = await client.post("/api/v1/workspaces", json={"name": "   "})
    assert r.status_code == 422
    assert r.json()["detail"] == "workspace name is required"


@pytest.mark.asyncio
async def test_duplicate_name_same_user_conflicts(make_client):
    client, _ = await _logged_in(make_client)
    assert (await client.post("/api/v1/workspaces", json={"name": "Dup"})).status_code == 201

    r = await client.post("/api/v1/workspaces", json={"name": "Dup"})
    assert r.status_code == 409
    assert r.json()["detail"] == "workspace with this name already exists"


@pytest.mark.asyncio
async def test_same_name_different_users_allowed(make_client):
    alice, _ = await _logged_in(make_client)
    bob, _ = await _logged_in(make_client)

    assert (await alice.post("/api/v1/workspaces", json={"name": "Home"})).status_code == 201
    assert (await bob.post("/api/v1/workspaces", json={"name": "Home"})).status_code == 201


@pytest.mark.asyncio
async def test_list_scoped_to_user_newest_first(make_client):
    alice, alice_id = await _logged_in(make_client)
    bob, _ = await _logged_in(make_client)

    ids = []
    for name in ("first", "second", "third"):
        r = await alice.post("/api/v1/workspaces", json={"name": name})
        ids.append(r.json()["id"])
    await bob.post("/api/v1/workspaces", json={"name": "bobs"})

    r = await alice.get("/api/v1/workspaces")
    assert r.status_code == 200
    listed = r.json()
    assert [w["id"] for w in listed] == list(reversed(ids))
    assert {w["created_by"] for w in listed} == {alice_id}

    r = await bob.get("/api/v1/workspaces")
    assert [w["name"] for w in r.json()] == ["bobs"]


@pytest.mark.asyncio
async def test_list_empty(make_client):
    client, _ = await _logged_in(make_client)
    r = await client.get("/api/v1/workspaces")
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_get_update_delete_own_workspace(make_client):
    client, _ = await _logged_in(make_client)
    ws_id = (await client.post("/api/v1/workspaces", json={"name": "Draft"})).json()["id"]

    r = await client.get(f"/api/v1/workspaces/{ws_id}")
    assert r.status_code == 200
    assert r.json()["name"] == "Draft"

    r = await client.put(
        f"/api/v1/workspaces/{ws_id}",
        json={"name": "Final", "description": "done"},
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Final"
    assert r.json()["description"] == "done"

    r = await client.delete(f"/api/v1/workspaces/{ws_id}")
    assert r.status_code == 200
    assert r.json() == {"message": "workspace deleted"}

    r = await client.get(f"/api/v1/workspaces/{ws_id}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_update_keeping_own_name_is_allowed(make_client):
    client, _ = await _logged_in(make_client)
    ws_id = (await client.post("/api/v1/workspaces", json={"name": "Same"})).json()["id"]

    r = await client.put(
        f"/api/v1/workspaces/{ws_id}", json={"name": "Same", "description": "edited"}
    )
    assert r.status_code == 200
    assert r.json()["description"] == "edited"


@pytest.mark.asyncio
async def test_rename_onto_existing_name_conflicts(make_client):
    client, _ = await _logged_in(make_client)
    await client.post("/api/v1/workspaces", json={"name": "Taken"})
    ws_id = (await client.post("/api/v1/workspaces", json={"name": "Free"})).json()["id"]

    r = await client.put(f"/api/v1/workspaces/{ws_id}", json={"name": "Taken"})
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_cross_user_update_and_delete_are_not_found(make_client):
    alice, _ = await _logged_in(make_client)
    mallory, _ = await _logged_in(make_client)
    ws_id = (
        await alice.post(
            "/api/v1/workspaces", json={"name": "Private", "description": "mine"}
        )
    ).json()["id"]

    r = await mallory.get(f"/api/v1/workspaces/{ws_id}")
    assert r.status_code == 404
    r = await mallory.put(
        f"/api/v1/workspaces/{ws_id}", json={"name": "Hijacked", "description": None}
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "workspace not found"
    r = await mallory.delete(f"/api/v1/workspaces/{ws_id}")
    assert r.status_code == 404

    r = await alice.get(f"/api/v1/workspaces/{ws_id}")
    assert r.status_code == 200
    assert r.json()["name"] == "Private"
    assert r.json()["description"] == "mine"


@pytest.mark.asyncio
async def test_missing_workspace_is_not_found(make_client):
    client, _ = await _logged_in(make_client)
    assert (await client.get("/api/v1/workspaces/999999")).status_code == 404
    assert (await client.delete("/api/v1/workspaces/999999")).status_code == 404


@pytest.mark.asyncio
async def test_out_of_range_id_is_not_found(make_client):
    client, _ = await _logged_in(make_client)
    for ws_id in ("99999999999999999999", str(2**31), "0", "-1"):
        assert (await client.get(f"/api/v1/workspaces/{ws_id}")).status_code == 404
        r = await client.put(f"/api/v1/workspaces/{ws_id}", json={"name": "x"})
        assert r.status_code == 404
        assert (await client.delete(f"/api/v1/workspaces/{ws_id}")).status_code == 404


@pytest.mark.asyncio
async def test_update_missing_workspace_with_taken_name_is_not_found(make_client):
    alice, _ = await _logged_in(make_client)
    mallory, _ = await _logged_in(make_client)
    await mallory.post("/api/v1/workspaces", json={"name": "Mine"})
    ws_id = (await alice.post("/api/v1/workspaces", json={"name": "Hers"})).json()["id"]

    r = await mallory.put(f"/api/v1/workspaces/{ws_id}", json={"name": "Mine"})
    assert r.status_code == 404
    r = await mallory.put("/api/v1/workspaces/999999", json={"name": "Mine"})
    assert r.status_code == 404
