from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Candidate(BaseModel):
    """A recommended profile as shown on the swipe deck."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    zip_code: Optional[str] = Field(default=None, alias="zipCode")
    image: Optional[str] = None
    bio: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    distance_miles: Optional[float] = Field(default=None, alias="distanceMiles")


class RecommendationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    users: List[Candidate] = Field(default_factory=list)
    second_chance: bool = Field(default=False, alias="secondChance")


class SecondChanceResponse(BaseModel):
    status: str = "ok"
    recorded: bool = False


__all__ = ["Candidate", "RecommendationResponse", "SecondChanceResponse"]
