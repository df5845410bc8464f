"""
Integration tests for address endpoints.
"""

import pytest


@pytest.mark.asyncio
async def test_create_address(client, passenger):
    response = await client.post("/v1/addresses", json={
        "user_id": passenger["id"],
        "address": "99 Sukhumvit Rd",
        "lat": 13.7367,
        "lng": "100.5231"
    })

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == "1"
    assert data["user_id"] == passenger["id"]
    assert data["lat"] == pytest.approx(13.7367)
    assert data["lng"] == pytest.approx(100.5231)


@pytest.mark.asyncio
async def test_create_address_without_coordinates(client, passenger):
    response = await client.post("/v1/addresses", json={"user_id": passenger["id"], "address": "Home"})

    assert response.status_code == 201
    assert response.json()["lat"] is None
    assert response.json()["lng"] is None


@pytest.mark.asyncio
async def test_create_address_unknown_user(client):
    response = await client.post("/v1/addresses", json={"user_id": "nonexistent", "address": "x"})

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_create_address_requires_fields(client, passenger):
    no_address = await client.post("/v1/addresses", json={"user_id": passenger["id"]})
    no_user = await client.post("/v1/addresses", json={"address": "x"})

    assert no_address.status_code == 400
    assert no_user.status_code == 400


@pytest.mark.asyncio
async def test_create_address_rejects_overlong_text(client, passenger):
    response = await client.post("/v1/addresses", json={
        "user_id": passenger["id"], "address": "a" * 1001
    })

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "address", "max_length": 1000}


@pytest.mark.asyncio
async def test_create_address_bad_coordinate(client, passenger):
    response = await client.post("/v1/addresses", json={
        "user_id": passenger["id"], "address": "x", "lat": "north"
    })

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_address_nested_route(client, passenger):
    response = await client.post(f"/v1/users/{passenger['id']}/addresses", json={"address": "Office"})
    missing = await client.post("/v1/users/999/addresses", json={"address": "Office"})

    assert response.status_code == 201
    assert response.json()["user_id"] == passenger["id"]
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_list_addresses_filtered(client, passenger):
    other = (await client.post("/v1/users", json={"name": "B", "password": "x", "phone": "0899"})).json()
    await client.post("/v1/addresses", json={"user_id": passenger["id"], "address": "Home"})
    await client.post("/v1/addresses", json={"user_id": other["id"], "address": "Elsewhere"})
    await client.post("/v1/addresses", json={"user_id": passenger["id"], "address": "Work"})

    everything = await client.get("/v1/addresses")
    mine = await client.get("/v1/addresses", params={"user_id": passenger["id"]})

    assert everything.json()["count"] == 3
    assert mine.json()["count"] == 2
    assert [a["address"] for a in mine.json()["items"]] == ["Home", "Work"]
