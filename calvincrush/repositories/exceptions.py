"""Errors raised by the Mongo repositories."""

from __future__ import annotations

from typing import Any, Optional


class RepositoryError(RuntimeError):
    """Base exception raised when a repository operation fails."""


class DuplicateKeyRepositoryError(RepositoryError):
    """A write collided with a unique index (for users: the lower-cased email)."""

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"{field} already exists")


class NotFoundRepositoryError(RepositoryError):
    """The referenced document does not exist or its id is malformed."""

    def __init__(self, entity: str = "User", identifier: Any = None) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found")


__all__ = [
    "DuplicateKeyRepositoryError",
    "NotFoundRepositoryError",
    "RepositoryError",
]
