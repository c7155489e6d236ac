from datetime import datetime

from sqlmodel import Field

from yardloop.schemas.user_schema import UserBase, UserProfileBase

from .timestamps import timestamp_column, utc_now


class User(UserBase, UserProfileBase, table=True):
    __tablename__ = "users"

    id: int = Field(default=None, primary_key=True)
    # identity resolved by the auth middleware, the core never sees tokens
    firebase_uid: str = Field(unique=True, index=True, max_length=128)
    username: str = Field(unique=True, index=True, min_length=1, max_length=200)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
