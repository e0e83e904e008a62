"""Repository helpers for the messages collection."""

from __future__ import annotations

from typing import List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from ..db.mongo import get_messages_collection
from ..models.message import Message


class MessageRepository:
    """MongoDB access layer for direct messages."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database
        self._collection: AsyncIOMotorCollection = get_messages_collection(database)

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    async def create_message(
        self,
        *,
        sender: str,
        recipient: str,
        text: str,
        timestamp: int,
    ) -> Message:
        doc = {
            "_id": ObjectId(),
            "sender": sender,
            "recipient": recipient,
            "text": text,
            "timestamp": timestamp,
            "read": False,
        }
        await self._collection.insert_one(doc)
        return Message(**doc)

    async def mark_thread_read(self, *, sender: str, recipient: str) -> int:
        """Flag every unread message from ``sender`` to ``recipient`` as read."""

        result = await self._collection.update_many(
            {"sender": sender, "recipient": recipient, "read": False},
            {"$set": {"read": True}},
        )
        return int(result.modified_count)

    async def get_thread(self, user_a: str, user_b: str) -> List[Message]:
        cursor = self._collection.find(
            {
                "$or": [
                    {"sender": user_a, "recipient": user_b},
                    {"sender": user_b, "recipient": user_a},
                ]
            }
        ).sort([("timestamp", 1), ("_id", 1)])
        return [Message(**doc) async for doc in cursor]

    async def list_for_participant(self, user_id: str) -> List[Message]:
        cursor = self._collection.find({"$or": [{"sender": user_id}, {"recipient": user_id}]})
        return [Message(**doc) async for doc in cursor]


__all__ = ["MessageRepository"]
