"""Identifier helpers shared across models and repositories."""

from __future__ import annotations

from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic.functional_serializers import PlainSerializer
from pydantic.functional_validators import BeforeValidator


def _validate_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("ObjectId string must not be empty")
        if not ObjectId.is_valid(text):
            raise ValueError("Invalid ObjectId hex string")
        return ObjectId(text)
    raise TypeError("ObjectId value must be str or ObjectId instance")


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return an ObjectId for ``value`` or None when it is not a valid id."""
    try:
        return _validate_object_id(value)
    except (TypeError, ValueError):
        return None


PyObjectId = Annotated[
    ObjectId,
    BeforeValidator(_validate_object_id),
    PlainSerializer(lambda value: str(value), return_type=str),
]

__all__ = ["PyObjectId", "parse_object_id"]
