from __future__ import annotations

import pytest

from calvincrush.db import get_db
from calvincrush.repositories.user import UserRepository


async def _swipe(api_client, actor_id: str, target_id: str, action: str):
    return await api_client.post(
        f"/api/users/{actor_id}/swipe",
        json={"targetId": target_id, "action": action},
    )


@pytest.mark.asyncio
async def test_mutual_like_creates_symmetric_match(api_client, create_user) -> None:
    alex = await create_user(name="Alex")
    bea = await create_user(name="Bea", gender="female")

    first = await _swipe(api_client, alex["id"], bea["id"], "like")
    assert first.status_code == 200
    assert first.json() == {"message": "Swipe recorded", "match": False}

    second = await _swipe(api_client, bea["id"], alex["id"], "like")
    assert second.status_code == 200
    assert second.json()["match"] is True

    repo = UserRepository(get_db())
    stored_alex = await repo.get_by_id(alex["id"])
    stored_bea = await repo.get_by_id(bea["id"])
    assert stored_alex is not None and stored_bea is not None
    assert stored_alex.matches == [bea["id"]]
    assert stored_bea.matches == [alex["id"]]

    matches = await api_client.get(f"/api/users/{alex['id']}/matches")
    assert matches.status_code == 200
    assert matches.json() == [
        {"id": bea["id"], "name": "Bea", "age": 25, "image": None, "bio": None}
    ]


@pytest.mark.asyncio
async def test_duplicate_like_is_rejected(api_client, create_user) -> None:
    alex = await create_user(name="Alex")
    bea = await create_user(name="Bea", gender="female")

    assert (await _swipe(api_client, alex["id"], bea["id"], "like")).status_code == 200
    again = await _swipe(api_client, alex["id"], bea["id"], "like")
    assert again.status_code == 400
    assert again.json()["message"] == "Already liked this user"

    stored = await UserRepository(get_db()).get_by_id(alex["id"])
    assert stored is not None
    assert stored.likes == [bea["id"]]


@pytest.mark.asyncio
async def test_two_strike_reject(api_client, create_user) -> None:
    alex = await create_user(name="Alex")
    bea = await create_user(name="Bea", gender="female")

    first = await _swipe(api_client, alex["id"], bea["id"], "reject")
    assert first.json()["message"] == "Rejected once"

    repo = UserRepository(get_db())
    stored = await repo.get_by_id(alex["id"])
    assert stored is not None
    assert stored.rejected_once == [bea["id"]]
    assert stored.rejected == []

    second = await _swipe(api_client, alex["id"], bea["id"], "reject")
    assert second.json()["message"] == "Rejected permanently"
    stored = await repo.get_by_id(alex["id"])
    assert stored is not None
    assert stored.rejected == [bea["id"]]
    assert stored.rejected_once == []

    third = await _swipe(api_client, alex["id"], bea["id"], "reject")
    assert third.status_code == 400
    assert third.json()["message"] == "Already rejected this user permanently"


@pytest.mark.asyncio
async def test_swipe_validation(api_client, create_user) -> None:
    alex = await create_user(name="Alex")
    bea = await create_user(name="Bea", gender="female")

    invalid = await _swipe(api_client, alex["id"], bea["id"], "superlike")
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Invalid action"

    self_swipe = await _swipe(api_client, alex["id"], alex["id"], "like")
    assert self_swipe.status_code == 400

    missing_target = await _swipe(api_client, alex["id"], "5f0c2b7e9d3f4a0012345678", "like")
    assert missing_target.status_code == 404

    missing_actor = await _swipe(api_client, "5f0c2b7e9d3f4a0012345678", bea["id"], "like")
    assert missing_actor.status_code == 404

    no_action = await api_client.post(f"/api/users/{alex['id']}/swipe", json={"targetId": bea["id"]})
    assert no_action.status_code == 400


@pytest.mark.asyncio
async def test_matches_for_unknown_user(api_client) -> None:
    response = await api_client.get("/api/users/5f0c2b7e9d3f4a0012345678/matches")
    assert response.status_code == 404
