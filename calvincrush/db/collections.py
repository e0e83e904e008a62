"""MongoDB collection names used by the API."""

from __future__ import annotations

USERS_COLLECTION = "users"
MESSAGES_COLLECTION = "messages"

__all__ = [
    "USERS_COLLECTION",
    "MESSAGES_COLLECTION",
]
