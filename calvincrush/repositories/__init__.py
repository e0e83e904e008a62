"""Repository layer to abstract MongoDB access patterns."""

from .message import MessageRepository
from .user import UserRepository

__all__ = ["MessageRepository", "UserRepository"]
