from pymongo import ASCENDING, DESCENDING
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from .collections import MESSAGES_COLLECTION, USERS_COLLECTION


async def ensure_users_indexes(db: AsyncIOMotorDatabase) -> None:
    collection = db[USERS_COLLECTION]
    await collection.create_index(
        "emailLower",
        name="users_email_lower_unique",
        unique=True,
    )
    await collection.create_index("gender", name="users_gender_idx")


async def ensure_messages_indexes(db: AsyncIOMotorDatabase) -> None:
    collection = db[MESSAGES_COLLECTION]
    await collection.create_index(
        [("sender", ASCENDING), ("recipient", ASCENDING), ("timestamp", ASCENDING)],
        name="messages_sender_recipient_ts_idx",
    )
    await collection.create_index(
        [("recipient", ASCENDING), ("read", ASCENDING)],
        name="messages_recipient_read_idx",
    )
    await collection.create_index(
        [("timestamp", DESCENDING)],
        name="messages_ts_idx",
    )


def get_users_collection(db: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    return db[USERS_COLLECTION]


def get_messages_collection(db: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    return db[MESSAGES_COLLECTION]


__all__ = [
    "ensure_users_indexes",
    "ensure_messages_indexes",
    "get_users_collection",
    "get_messages_collection",
]
