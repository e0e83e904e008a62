from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ..models.recommendation import RecommendationResponse, SecondChanceResponse
from ..models.user import MatchedUser, SwipeRequest, SwipeResponse, User, UserCreateRequest
from ..repositories.exceptions import NotFoundRepositoryError
from ..services.exceptions import InvalidArgumentError
from ..services.recommendation_service import (
    RecommendationService,
    get_recommendation_service,
)
from ..services.swipe_service import SwipeService, get_swipe_service
from ..services.user_service import UserService, get_user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreateRequest,
    service: UserService = Depends(get_user_service),
) -> User:
    try:
        created = await service.create_user(payload)
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return service.redact(created)


@router.get("", response_model=List[User])
async def list_users(service: UserService = Depends(get_user_service)) -> List[User]:
    return [service.redact(doc) for doc in await service.list_users()]


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> User:
    try:
        doc = await service.get_user(user_id.strip())
    except NotFoundRepositoryError:
        raise HTTPException(status_code=404, detail="User not found") from None
    return service.redact(doc)


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    fields: Dict[str, Any] = Body(...),
    service: UserService = Depends(get_user_service),
) -> User:
    try:
        updated = await service.update_profile(user_id.strip(), fields)
    except NotFoundRepositoryError:
        raise HTTPException(status_code=404, detail="User not found") from None
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return service.redact(updated)


@router.get("/{user_id}/recommendations", response_model=RecommendationResponse)
async def recommendations(
    user_id: str,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationResponse:
    try:
        return await service.recommend(user_id.strip())
    except NotFoundRepositoryError:
        raise HTTPException(status_code=404, detail="User not found") from None


@router.patch("/{user_id}/secondChance/{target_id}", response_model=SecondChanceResponse)
async def mark_second_chance(
    user_id: str,
    target_id: str,
    service: RecommendationService = Depends(get_recommendation_service),
) -> SecondChanceResponse:
    try:
        recorded = await service.mark_second_chance_shown(user_id.strip(), target_id)
    except NotFoundRepositoryError:
        raise HTTPException(status_code=404, detail="User not found") from None
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return SecondChanceResponse(recorded=recorded)


@router.post("/{user_id}/swipe", response_model=SwipeResponse)
async def swipe(
    user_id: str,
    payload: SwipeRequest,
    service: SwipeService = Depends(get_swipe_service),
) -> SwipeResponse:
    try:
        return await service.swipe(user_id, payload.target_id, payload.action)
    except NotFoundRepositoryError:
        raise HTTPException(status_code=404, detail="User not found") from None
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/{user_id}/matches", response_model=List[MatchedUser])
async def list_matches(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> List[MatchedUser]:
    try:
        return await service.list_matches(user_id.strip())
    except NotFoundRepositoryError:
        raise HTTPException(status_code=404, detail="User not found") from None


__all__ = ["router"]
