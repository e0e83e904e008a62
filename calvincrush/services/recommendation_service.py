from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from fastapi import Depends

from ..db import get_db
from ..integrations.zip_lookup import Coordinates, ZipCodeLookup, get_zip_code_lookup
from ..models.identifiers import parse_object_id
from ..models.recommendation import Candidate, RecommendationResponse
from ..models.user import UserDocument
from ..repositories.exceptions import NotFoundRepositoryError
from ..repositories.user import UserRepository
from ..utils.geo import haversine_miles, normalize_zip_code
from .exceptions import InvalidArgumentError

LOGGER = logging.getLogger("uvicorn.error")

OPPOSITE_GENDER = {"male": "female", "female": "male"}


class RecommendationService:
    """Builds the swipe deck for a user, with a one-time second look at rejected profiles."""

    def __init__(self, repository: UserRepository, zip_lookup: ZipCodeLookup) -> None:
        self._repository = repository
        self._zip_lookup = zip_lookup

    def _coordinates(self, user: UserDocument) -> Optional[Coordinates]:
        zip_code = normalize_zip_code(user.zip_code)
        if zip_code is None:
            return None
        return self._zip_lookup.lookup(zip_code)

    def _to_candidate(self, user: UserDocument, origin: Optional[Coordinates]) -> Candidate:
        distance = None
        if origin is not None:
            distance = haversine_miles(origin, self._coordinates(user))
        return Candidate(
            id=user.user_id,
            name=user.name,
            age=user.age,
            gender=user.gender,
            zip_code=user.zip_code,
            image=user.display_image,
            bio=user.display_bio,
            photos=list(user.photos),
            distance_miles=distance,
        )

    def _shape(self, users: Iterable[UserDocument], requester: UserDocument) -> List[Candidate]:
        origin = self._coordinates(requester)
        return [self._to_candidate(user, origin) for user in users]

    async def recommend(self, user_id: str) -> RecommendationResponse:
        requester = await self._repository.get_by_id(user_id)
        if not requester:
            raise NotFoundRepositoryError("User", user_id)

        wanted_gender = OPPOSITE_GENDER.get(requester.gender or "")
        if wanted_gender is None:
            return RecommendationResponse(users=[], second_chance=False)

        excluded = {requester.user_id, *requester.likes, *requester.matches, *requester.rejected}
        pool = await self._repository.find_by_gender(wanted_gender, exclude_ids=excluded)
        pool = [user for user in pool if user.user_id not in excluded]
        if pool:
            return RecommendationResponse(users=self._shape(pool, requester), second_chance=False)

        shown = set(requester.second_chance_shown)
        acted = {requester.user_id, *requester.likes, *requester.matches}
        reconsider = [uid for uid in requester.rejected if uid not in shown and uid not in acted]
        if not reconsider:
            return RecommendationResponse(users=[], second_chance=False)

        second_pool = await self._repository.find_by_gender(wanted_gender, include_ids=reconsider)
        second_pool = [user for user in second_pool if user.user_id not in shown]
        if not second_pool:
            return RecommendationResponse(users=[], second_chance=False)
        LOGGER.debug("Serving %d second-chance profiles to %s", len(second_pool), requester.user_id)
        return RecommendationResponse(users=self._shape(second_pool, requester), second_chance=True)

    async def mark_second_chance_shown(self, user_id: str, target_id: str) -> bool:
        """Remember that ``target_id`` was offered as a second chance. Returns False if it already was."""

        target_id = (target_id or "").strip()
        requester = await self._repository.get_by_id(user_id)
        if not requester:
            raise NotFoundRepositoryError("User", user_id)
        if parse_object_id(target_id) is None:
            raise InvalidArgumentError("targetId must be a valid user id")
        if target_id in requester.second_chance_shown:
            return False
        return await self._repository.add_to_set(requester.user_id, "secondChanceShown", target_id)


def get_recommendation_service(
    zip_lookup: ZipCodeLookup = Depends(get_zip_code_lookup),
) -> RecommendationService:
    return RecommendationService(UserRepository(get_db()), zip_lookup)


__all__ = ["OPPOSITE_GENDER", "RecommendationService", "get_recommendation_service"]
