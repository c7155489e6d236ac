from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import Field, SQLModel


class ConversationCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    listing_id: int


class ConversationRead(SQLModel):
    id: int
    listing_id: int
    buyer_id: int
    seller_id: int
    created_at: datetime
    updated_at: datetime


class LastMessage(SQLModel):
    body: str
    sender_id: int
    created_at: datetime


# inbox row, counterpart names and the unread badge included
class ConversationSummary(ConversationRead):
    listing_title: str
    listing_location: str
    buyer_username: str
    buyer_avatar: str | None = None
    seller_username: str
    seller_avatar: str | None = None
    last_message: LastMessage | None = None
    unread_count: int = 0


class MessageCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    body: str = Field(min_length=1, max_length=5000)

    @field_validator("body", mode="before")
    @classmethod
    def strip_body(cls, value):
        return value.strip() if isinstance(value, str) else value


class MessageRead(SQLModel):
    id: int
    conversation_id: int
    sender_id: int
    body: str
    created_at: datetime
    read_at: datetime | None = None
