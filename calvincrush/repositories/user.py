"""Repository helpers for the users collection."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument, UpdateOne
from pymongo.errors import DuplicateKeyError

from ..db.mongo import get_users_collection
from ..models.identifiers import parse_object_id
from ..models.user import UserDocument
from .exceptions import DuplicateKeyRepositoryError, NotFoundRepositoryError

LOGGER = logging.getLogger("uvicorn.error")


class UserRepository:
    """Thin abstraction over the users MongoDB collection."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = get_users_collection(database)

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def create_user(self, doc: Dict[str, Any]) -> UserDocument:
        """Insert a new user document; ``_id`` is generated when missing."""

        doc = {"_id": ObjectId(), **doc}
        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError as exc:
            LOGGER.debug("Duplicate user insertion for email=%s", doc.get("email"))
            raise DuplicateKeyRepositoryError("email", "email already registered") from exc
        return UserDocument(**doc)

    async def get_by_id(self, user_id: Any) -> Optional[UserDocument]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        doc = await self._collection.find_one({"_id": oid})
        return UserDocument(**doc) if doc else None

    async def get_many(self, user_ids: Iterable[str]) -> Dict[str, UserDocument]:
        oids = [oid for oid in (parse_object_id(uid) for uid in user_ids) if oid is not None]
        if not oids:
            return {}
        found: Dict[str, UserDocument] = {}
        async for doc in self._collection.find({"_id": {"$in": oids}}):
            user = UserDocument(**doc)
            found[user.user_id] = user
        return found

    async def list_users(self) -> List[UserDocument]:
        return [UserDocument(**doc) async for doc in self._collection.find({})]

    async def find_by_gender(
        self,
        gender: str,
        *,
        include_ids: Optional[Iterable[str]] = None,
        exclude_ids: Iterable[str] = (),
    ) -> List[UserDocument]:
        """Return users of ``gender`` limited to ``include_ids`` when given, minus ``exclude_ids``."""

        query: Dict[str, Any] = {"gender": gender}
        id_clause: Dict[str, Any] = {}
        if include_ids is not None:
            id_clause["$in"] = [oid for oid in map(parse_object_id, include_ids) if oid is not None]
        excluded = [oid for oid in map(parse_object_id, exclude_ids) if oid is not None]
        if excluded:
            id_clause["$nin"] = excluded
        if id_clause:
            query["_id"] = id_clause
        return [UserDocument(**doc) async for doc in self._collection.find(query)]

    async def update_user(self, user_id: Any, updates: Dict[str, Any]) -> UserDocument:
        oid = parse_object_id(user_id)
        if oid is None:
            raise NotFoundRepositoryError("User", user_id)
        try:
            result = await self._collection.find_one_and_update(
                {"_id": oid},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise DuplicateKeyRepositoryError("email", "email already registered") from exc
        if not result:
            raise NotFoundRepositoryError("User", user_id)
        return UserDocument(**result)

    async def add_to_set_if_absent(self, user_id: str, field: str, value: str) -> bool:
        """Add ``value`` to the ``field`` set only when it is not already present.

        Returns False when the value was already there, so callers can treat the
        membership check and the write as one conditional update.
        """

        oid = parse_object_id(user_id)
        if oid is None:
            raise NotFoundRepositoryError("User", user_id)
        result = await self._collection.update_one(
            {"_id": oid, field: {"$ne": value}},
            {"$addToSet": {field: value}},
        )
        return bool(result.modified_count)

    async def move_between_sets(
        self,
        user_id: str,
        *,
        source: str,
        destination: str,
        value: str,
    ) -> bool:
        """Move ``value`` from one set to another if it is in ``source`` and not yet in ``destination``."""

        oid = parse_object_id(user_id)
        if oid is None:
            raise NotFoundRepositoryError("User", user_id)
        result = await self._collection.update_one(
            {"_id": oid, "$and": [{source: value}, {destination: {"$ne": value}}]},
            {"$pull": {source: value}, "$addToSet": {destination: value}},
        )
        return bool(result.modified_count)

    async def add_to_set(self, user_id: str, field: str, value: str) -> bool:
        oid = parse_object_id(user_id)
        if oid is None:
            raise NotFoundRepositoryError("User", user_id)
        result = await self._collection.update_one({"_id": oid}, {"$addToSet": {field: value}})
        if not result.matched_count:
            raise NotFoundRepositoryError("User", user_id)
        return bool(result.modified_count)

    async def record_mutual_match(self, user_a: str, user_b: str) -> None:
        """Add each user to the other's ``matches`` set in one ordered bulk write."""

        oid_a = parse_object_id(user_a)
        oid_b = parse_object_id(user_b)
        if oid_a is None or oid_b is None:
            raise NotFoundRepositoryError("User", user_b if oid_a is not None else user_a)
        await self._collection.bulk_write(
            [
                UpdateOne({"_id": oid_a}, {"$addToSet": {"matches": user_b}}),
                UpdateOne({"_id": oid_b}, {"$addToSet": {"matches": user_a}}),
            ],
            ordered=True,
        )

    async def email_exists(self, email: str, *, exclude_user_id: Optional[str] = None) -> bool:
        query: Dict[str, Any] = {"emailLower": email.lower()}
        exclude = parse_object_id(exclude_user_id) if exclude_user_id else None
        if exclude is not None:
            query["_id"] = {"$ne": exclude}
        doc = await self._collection.find_one(query, projection={"_id": 1})
        return doc is not None


__all__ = ["UserRepository"]
