from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from .timestamps import timestamp_column, utc_now

if TYPE_CHECKING:
    from .listing_model import Listing
    from .user_model import User


class Conversation(SQLModel, table=True):
    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint(
            "listing_id", "buyer_id", "seller_id", name="uix_conversation_participants"
        ),
    )

    id: int = Field(default=None, primary_key=True)
    listing_id: int = Field(foreign_key="listings.id", ondelete="CASCADE", index=True)
    buyer_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    seller_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    listing: "Listing" = Relationship()
    buyer: "User" = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Conversation.buyer_id]"}
    )
    seller: "User" = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Conversation.seller_id]"}
    )


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: int = Field(default=None, primary_key=True)
    conversation_id: int = Field(
        foreign_key="conversations.id", ondelete="CASCADE", index=True
    )
    sender_id: int = Field(foreign_key="users.id", ondelete="CASCADE")
    body: str = Field(min_length=1, max_length=5000)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    # set once the recipient has fetched the conversation
    read_at: Optional[datetime] = Field(
        default=None, sa_column=timestamp_column(nullable=True)
    )
