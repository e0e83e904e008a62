from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .identifiers import PyObjectId

Gender = Literal["male", "female"]


class UserCreateRequest(BaseModel):
    """Payload accepted by the registration endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=6, max_length=128)
    gender: Gender
    name: Optional[str] = Field(default=None, max_length=80)
    age: Optional[int] = Field(default=None, ge=18, le=120)
    bio: Optional[str] = None
    about_me: Optional[str] = Field(default=None, alias="aboutMe")
    image: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    zip_code: Optional[str] = Field(default=None, alias="zipCode")
    denomination: Optional[str] = None
    marital_status: Optional[str] = Field(default=None, alias="maritalStatus")
    drinking: Optional[str] = None
    smoking: Optional[str] = None
    hobbies: Optional[List[str]] = None


class UserDocument(BaseModel):
    """Canonical representation of a user document stored in MongoDB."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    email: Optional[str] = None
    email_lower: Optional[str] = Field(default=None, alias="emailLower")
    password_hash: Optional[str] = Field(default=None, alias="passwordHash")
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    bio: Optional[str] = None
    about_me: Optional[str] = Field(default=None, alias="aboutMe")
    image: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    zip_code: Optional[str] = Field(default=None, alias="zipCode")
    denomination: Optional[str] = None
    marital_status: Optional[str] = Field(default=None, alias="maritalStatus")
    drinking: Optional[str] = None
    smoking: Optional[str] = None
    hobbies: Optional[List[str]] = None
    likes: List[str] = Field(default_factory=list)
    matches: List[str] = Field(default_factory=list)
    rejected: List[str] = Field(default_factory=list)
    rejected_once: List[str] = Field(default_factory=list, alias="rejectedOnce")
    second_chance_shown: List[str] = Field(default_factory=list, alias="secondChanceShown")
    profile_completed: bool = Field(default=False, alias="profileCompleted")
    created_at: Optional[int] = Field(default=None, alias="createdAt")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")

    @property
    def user_id(self) -> str:
        return str(self.id)

    @property
    def display_image(self) -> Optional[str]:
        return self.photos[0] if self.photos else self.image

    @property
    def display_bio(self) -> Optional[str]:
        return self.about_me or self.bio


class User(BaseModel):
    """Public-facing user record returned to clients (no password hash)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    email: Optional[str] = None
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    bio: Optional[str] = None
    about_me: Optional[str] = Field(default=None, alias="aboutMe")
    image: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    zip_code: Optional[str] = Field(default=None, alias="zipCode")
    denomination: Optional[str] = None
    marital_status: Optional[str] = Field(default=None, alias="maritalStatus")
    drinking: Optional[str] = None
    smoking: Optional[str] = None
    hobbies: Optional[List[str]] = None
    likes: List[str] = Field(default_factory=list)
    matches: List[str] = Field(default_factory=list)
    rejected: List[str] = Field(default_factory=list)
    rejected_once: List[str] = Field(default_factory=list, alias="rejectedOnce")
    second_chance_shown: List[str] = Field(default_factory=list, alias="secondChanceShown")
    profile_completed: bool = Field(default=False, alias="profileCompleted")
    created_at: Optional[int] = Field(default=None, alias="createdAt")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")


class MatchedUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = None
    age: Optional[int] = None
    image: Optional[str] = None
    bio: Optional[str] = None


class SwipeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_id: str = Field(alias="targetId", min_length=1)
    # Validated by the swipe service so unknown actions map to a 400 with a message
    action: str


class SwipeResponse(BaseModel):
    message: str
    match: bool = False


__all__ = [
    "Gender",
    "MatchedUser",
    "SwipeRequest",
    "SwipeResponse",
    "User",
    "UserCreateRequest",
    "UserDocument",
]
