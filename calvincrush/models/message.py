from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .identifiers import PyObjectId


class MessageCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender: Optional[str] = None
    recipient: Optional[str] = None
    text: Optional[str] = None


class Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    sender: str
    recipient: str
    text: str
    timestamp: int
    read: bool = False


class ConversationUser(BaseModel):
    id: str
    name: Optional[str] = None
    image: Optional[str] = None


class ConversationSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    other_user_id: str = Field(alias="otherUserId")
    other_user: ConversationUser = Field(alias="otherUser")
    last_message: str = Field(alias="lastMessage")
    timestamp: int
    unread: bool = False


__all__ = [
    "ConversationSummary",
    "ConversationUser",
    "Message",
    "MessageCreateRequest",
]
