"""Domain errors raised by the service layer."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised for missing or malformed input (HTTP 400)."""


class AlreadyActedError(InvalidArgumentError):
    """Raised when a like or reject was already applied to the same target."""


__all__ = ["AlreadyActedError", "InvalidArgumentError"]
