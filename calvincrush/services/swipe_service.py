"""Like / reject state machine and mutual match detection.

Rejections follow a two-strike policy: the first reject of a target parks it in
``rejectedOnce`` (it keeps showing up in recommendations), the second moves it
into ``rejected`` permanently, and any further reject is refused.

Every write is a conditional update against the actor's own document, so the
membership check and the append happen in one store operation. A mutual match
is written to both documents through a single ordered bulk write of idempotent
``$addToSet`` updates.
"""

from __future__ import annotations

import logging

from ..db import get_db
from ..models.user import SwipeResponse
from ..repositories.exceptions import NotFoundRepositoryError
from ..repositories.user import UserRepository
from .exceptions import AlreadyActedError, InvalidArgumentError

LOGGER = logging.getLogger("uvicorn.error")

MATCH_MESSAGE = "It's a match!"
LIKE_MESSAGE = "Swipe recorded"
REJECTED_ONCE_MESSAGE = "Rejected once"
REJECTED_PERMANENTLY_MESSAGE = "Rejected permanently"


class SwipeService:
    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def swipe(self, actor_id: str, target_id: str, action: str) -> SwipeResponse:
        actor_id = (actor_id or "").strip()
        target_id = (target_id or "").strip()
        if not target_id:
            raise InvalidArgumentError("targetId required")

        actor = await self._repository.get_by_id(actor_id)
        target = await self._repository.get_by_id(target_id)
        if not actor:
            raise NotFoundRepositoryError("User", actor_id)
        if not target:
            raise NotFoundRepositoryError("User", target_id)
        if actor.user_id == target.user_id:
            raise InvalidArgumentError("Cannot swipe on yourself")

        if action == "like":
            return await self._like(actor.user_id, target.user_id, target.likes)
        if action == "reject":
            return await self._reject(actor.user_id, target.user_id)
        raise InvalidArgumentError("Invalid action")

    async def _like(self, actor_id: str, target_id: str, target_likes: list[str]) -> SwipeResponse:
        added = await self._repository.add_to_set_if_absent(actor_id, "likes", target_id)
        if not added:
            raise AlreadyActedError("Already liked this user")

        if actor_id not in target_likes:
            # The target may have liked us between our read and our write.
            refreshed = await self._repository.get_by_id(target_id)
            if not refreshed or actor_id not in refreshed.likes:
                return SwipeResponse(message=LIKE_MESSAGE, match=False)

        await self._repository.record_mutual_match(actor_id, target_id)
        LOGGER.info("Match recorded between %s and %s", actor_id, target_id)
        return SwipeResponse(message=MATCH_MESSAGE, match=True)

    async def _reject(self, actor_id: str, target_id: str) -> SwipeResponse:
        if await self._repository.move_between_sets(
            actor_id,
            source="rejectedOnce",
            destination="rejected",
            value=target_id,
        ):
            return SwipeResponse(message=REJECTED_PERMANENTLY_MESSAGE)

        actor = await self._repository.get_by_id(actor_id)
        if actor and target_id in actor.rejected:
            raise AlreadyActedError("Already rejected this user permanently")

        if await self._repository.add_to_set_if_absent(actor_id, "rejectedOnce", target_id):
            return SwipeResponse(message=REJECTED_ONCE_MESSAGE)
        # A concurrent reject parked the target first; this one completes the second strike.
        if await self._repository.move_between_sets(
            actor_id,
            source="rejectedOnce",
            destination="rejected",
            value=target_id,
        ):
            return SwipeResponse(message=REJECTED_PERMANENTLY_MESSAGE)
        raise AlreadyActedError("Already rejected this user permanently")


def get_swipe_service() -> SwipeService:
    return SwipeService(UserRepository(get_db()))


__all__ = ["SwipeService", "get_swipe_service"]
