from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import bcrypt
from pydantic import ValidationError

from ..db import get_db
from ..models.user import MatchedUser, User, UserCreateRequest, UserDocument
from ..repositories.exceptions import DuplicateKeyRepositoryError, NotFoundRepositoryError
from ..repositories.user import UserRepository
from ..utils.geo import normalize_zip_code
from .exceptions import InvalidArgumentError

LOGGER = logging.getLogger("uvicorn.error")

# Fields only the server may write; everything else in a payload is merged as-is.
PROTECTED_FIELDS = frozenset(
    {
        "_id",
        "id",
        "emailLower",
        "passwordHash",
        "likes",
        "matches",
        "rejected",
        "rejectedOnce",
        "secondChanceShown",
        "profileCompleted",
        "createdAt",
        "updatedAt",
    }
)


def _clean_str(value: Any, max_len: Optional[int] = None) -> Optional[str]:
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if max_len is not None and len(text) > max_len:
            text = text[:max_len]
        return text
    return None


def _normalize_photo_list(raw: Any, limit: int = 12) -> List[str]:
    photos: List[str] = []
    if isinstance(raw, (list, tuple)):
        for entry in raw:
            cleaned = _clean_str(entry, max_len=512)
            if not cleaned or cleaned in photos:
                continue
            photos.append(cleaned)
            if len(photos) >= limit:
                break
    return photos


def _describe_validation_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid profile fields"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else str(first.get("msg"))


def compute_profile_completed(doc: Dict[str, Any]) -> bool:
    """A profile is complete with an age, a gender, a photo and a valid ZIP code."""
    return (
        doc.get("age") is not None
        and bool(doc.get("gender"))
        and bool(_normalize_photo_list(doc.get("photos")))
        and normalize_zip_code(doc.get("zipCode")) is not None
    )


class UserService:
    """Profile create/read/update flows and match listing."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    @staticmethod
    def hash_password(raw: str) -> str:
        salt = bcrypt.gensalt()
        return bcrypt.hashpw(raw.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _normalize_email(raw: Any) -> str:
        email = _clean_str(raw, max_len=254)
        if not email or "@" not in email or email.startswith("@") or email.endswith("@"):
            raise InvalidArgumentError("valid email required")
        return email

    async def create_user(self, payload: UserCreateRequest) -> UserDocument:
        email = self._normalize_email(payload.email)
        if await self._repository.email_exists(email):
            raise InvalidArgumentError("email already registered")

        data = payload.model_dump(by_alias=True, exclude={"email", "password"}, exclude_none=True)
        for field in PROTECTED_FIELDS:
            data.pop(field, None)

        data["photos"] = _normalize_photo_list(data.get("photos"))
        if "zipCode" in data:
            zip_code = normalize_zip_code(data["zipCode"])
            if zip_code is None:
                raise InvalidArgumentError("zipCode must be a 5-digit postal code")
            data["zipCode"] = zip_code

        now_ms = self._now_ms()
        doc: Dict[str, Any] = {
            **data,
            "email": email,
            "emailLower": email.lower(),
            "passwordHash": self.hash_password(payload.password),
            "likes": [],
            "matches": [],
            "rejected": [],
            "rejectedOnce": [],
            "secondChanceShown": [],
            "createdAt": now_ms,
            "updatedAt": now_ms,
        }
        doc["profileCompleted"] = compute_profile_completed(doc)

        try:
            created = await self._repository.create_user(doc)
        except DuplicateKeyRepositoryError as exc:
            raise InvalidArgumentError(str(exc)) from exc
        LOGGER.info("Created user %s", created.user_id)
        return created

    async def list_users(self) -> List[UserDocument]:
        return await self._repository.list_users()

    async def get_user(self, user_id: str) -> UserDocument:
        user = await self._repository.get_by_id(user_id)
        if not user:
            raise NotFoundRepositoryError("User", user_id)
        return user

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> UserDocument:
        current = await self.get_user(user_id)

        for key in fields:
            if not isinstance(key, str) or not key or key.startswith("$") or "." in key:
                raise InvalidArgumentError(f"invalid field name: {key!r}")

        updates: Dict[str, Any] = {
            key: value for key, value in fields.items() if key not in PROTECTED_FIELDS
        }

        if "email" in updates:
            email = self._normalize_email(updates["email"])
            if await self._repository.email_exists(email, exclude_user_id=current.user_id):
                raise InvalidArgumentError("email already registered")
            updates["email"] = email
            updates["emailLower"] = email.lower()

        password = updates.pop("password", None)
        if password is not None:
            if not isinstance(password, str) or len(password) < 6:
                raise InvalidArgumentError("password must be at least 6 characters")
            updates["passwordHash"] = self.hash_password(password)

        if "photos" in updates:
            updates["photos"] = _normalize_photo_list(updates["photos"])

        if "zipCode" in updates:
            zip_code = normalize_zip_code(updates["zipCode"])
            if zip_code is None:
                raise InvalidArgumentError("zipCode must be a 5-digit postal code")
            updates["zipCode"] = zip_code

        merged = {**current.model_dump(by_alias=True), **updates}
        if normalize_zip_code(merged.get("zipCode")) is None:
            raise InvalidArgumentError("a valid 5-digit zipCode is required")
        try:
            validated = UserDocument.model_validate(merged)
        except ValidationError as exc:
            raise InvalidArgumentError(_describe_validation_error(exc)) from exc
        if validated.gender is None:
            raise InvalidArgumentError("gender must be 'male' or 'female'")
        normalized = validated.model_dump(by_alias=True)
        updates = {key: normalized.get(key, value) for key, value in updates.items()}

        updates["profileCompleted"] = compute_profile_completed(normalized)
        updates["updatedAt"] = self._now_ms()
        return await self._repository.update_user(current.user_id, updates)

    async def list_matches(self, user_id: str) -> List[MatchedUser]:
        user = await self.get_user(user_id)
        found = await self._repository.get_many(user.matches)
        results: List[MatchedUser] = []
        for match_id in user.matches:
            other = found.get(match_id)
            if other is None:
                continue
            results.append(
                MatchedUser(
                    id=other.user_id,
                    name=other.name,
                    age=other.age,
                    image=other.display_image,
                    bio=other.display_bio,
                )
            )
        return results

    @staticmethod
    def redact(doc: UserDocument) -> User:
        data = doc.model_dump(by_alias=True)
        data.pop("passwordHash", None)
        data.pop("emailLower", None)
        return User(**data)


def get_user_service() -> UserService:
    return UserService(UserRepository(get_db()))


__all__ = ["UserService", "compute_profile_completed", "get_user_service"]
