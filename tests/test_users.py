from __future__ import annotations

import pytest

from calvincrush.db import get_db
from calvincrush.db.collections import USERS_COLLECTION


@pytest.mark.asyncio
async def test_create_user_hashes_password_and_hides_it(api_client) -> None:
    response = await api_client.post(
        "/api/users",
        json={
            "email": "Ada@Example.com",
            "password": "hunter22",
            "gender": "female",
            "name": "Ada",
            "age": 30,
            "photos": ["https://cdn.test/a.jpg"],
            "zipCode": " 10001 ",
            "favoriteVerse": "John 3:16",
        },
    )
    assert response.status_code == 201, response.text
    payload = response.json()
    assert payload["name"] == "Ada"
    assert payload["zipCode"] == "10001"
    assert payload["profileCompleted"] is True
    assert payload["favoriteVerse"] == "John 3:16"
    assert payload["likes"] == [] and payload["matches"] == []
    assert "passwordHash" not in payload
    assert "password" not in payload

    stored = await get_db()[USERS_COLLECTION].find_one({"emailLower": "ada@example.com"})
    assert stored is not None
    assert stored["passwordHash"] != "hunter22"
    assert stored["passwordHash"].startswith("$2")


@pytest.mark.asyncio
async def test_create_user_requires_gender(api_client) -> None:
    response = await api_client.post(
        "/api/users",
        json={"email": "nogender@example.com", "password": "hunter22"},
    )
    assert response.status_code == 400
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_create_user_rejects_duplicate_email(api_client, create_user) -> None:
    await create_user(email="dup@example.com")
    response = await api_client.post(
        "/api/users",
        json={"email": "DUP@example.com", "password": "hunter22", "gender": "female"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "email already registered"


@pytest.mark.asyncio
async def test_list_and_get_users(api_client, create_user) -> None:
    first = await create_user(name="Ben")
    await create_user(name="Cara", gender="female")

    listed = await api_client.get("/api/users")
    assert listed.status_code == 200
    names = sorted(user["name"] for user in listed.json())
    assert names == ["Ben", "Cara"]

    fetched = await api_client.get(f"/api/users/{first['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == first["id"]


@pytest.mark.asyncio
async def test_get_unknown_user_returns_404(api_client) -> None:
    missing = await api_client.get("/api/users/5f0c2b7e9d3f4a0012345678")
    assert missing.status_code == 404
    assert missing.json() == {"message": "User not found"}

    malformed = await api_client.get("/api/users/not-an-id")
    assert malformed.status_code == 404


@pytest.mark.asyncio
async def test_update_profile_recomputes_completion(api_client, create_user) -> None:
    user = await create_user(name="Dan", zipCode="10001")
    assert user["profileCompleted"] is False

    response = await api_client.put(
        f"/api/users/{user['id']}",
        json={"photos": ["https://cdn.test/dan.jpg"], "aboutMe": "Hi", "church": "Grace"},
    )
    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["profileCompleted"] is True
    assert payload["aboutMe"] == "Hi"
    assert payload["church"] == "Grace"

    cleared = await api_client.put(f"/api/users/{user['id']}", json={"photos": []})
    assert cleared.status_code == 200
    assert cleared.json()["profileCompleted"] is False


@pytest.mark.asyncio
async def test_update_profile_requires_valid_zip(api_client, create_user) -> None:
    user = await create_user(name="Eve")

    no_zip = await api_client.put(f"/api/users/{user['id']}", json={"name": "Eve B"})
    assert no_zip.status_code == 400

    bad_zip = await api_client.put(f"/api/users/{user['id']}", json={"zipCode": "1234a"})
    assert bad_zip.status_code == 400

    ok = await api_client.put(f"/api/users/{user['id']}", json={"zipCode": "60601"})
    assert ok.status_code == 200
    assert ok.json()["zipCode"] == "60601"


@pytest.mark.asyncio
async def test_update_profile_cannot_touch_relationship_sets(api_client, create_user) -> None:
    user = await create_user(name="Fay", zipCode="10001")
    response = await api_client.put(
        f"/api/users/{user['id']}",
        json={"likes": ["someone"], "matches": ["someone"], "profileCompleted": True},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["likes"] == []
    assert payload["matches"] == []
    assert payload["profileCompleted"] is False


@pytest.mark.asyncio
async def test_update_unknown_user_returns_404(api_client) -> None:
    response = await api_client.put(
        "/api/users/5f0c2b7e9d3f4a0012345678",
        json={"zipCode": "10001"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_root_and_health(api_client) -> None:
    root = await api_client.get("/")
    assert root.json() == {"status": "calvincrush-api-ok"}
    health = await api_client.get("/api/health/db")
    assert health.json()["mongo"] == "connected"


@pytest.mark.asyncio
async def test_update_profile_rejects_dotted_and_operator_keys(api_client, create_user) -> None:
    alex = await create_user(name="Alex", zipCode="10001")
    bea = await create_user(name="Bea", gender="female", zipCode="10002")
    liked = await api_client.post(
        f"/api/users/{alex['id']}/swipe",
        json={"targetId": bea["id"], "action": "like"},
    )
    assert liked.status_code == 200

    for body in (
        {"likes.0": alex["id"], "matches.0": alex["id"]},
        {"$set": {"likes": [alex["id"]]}},
        {"hobbies.0": "chess"},
    ):
        response = await api_client.put(f"/api/users/{alex['id']}", json=body)
        assert response.status_code == 400, body
        assert "invalid field name" in response.json()["message"]

    stored = (await api_client.get(f"/api/users/{alex['id']}")).json()
    assert stored["likes"] == [bea["id"]]
    assert stored["matches"] == []


@pytest.mark.asyncio
async def test_update_profile_requires_gender(api_client, create_user) -> None:
    user = await create_user(name="Gil", zipCode="10001")

    cleared = await api_client.put(f"/api/users/{user['id']}", json={"gender": None})
    assert cleared.status_code == 400

    unknown = await api_client.put(f"/api/users/{user['id']}", json={"gender": "other"})
    assert unknown.status_code == 400

    stored = (await api_client.get(f"/api/users/{user['id']}")).json()
    assert stored["gender"] == "male"


@pytest.mark.asyncio
async def test_create_user_enforces_age_bounds(api_client) -> None:
    for age in (17, 121):
        response = await api_client.post(
            "/api/users",
            json={"email": f"age{age}@example.com", "password": "hunter22", "gender": "female", "age": age},
        )
        assert response.status_code == 400, age
