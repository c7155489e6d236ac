from datetime import datetime
from typing import Annotated, Union

import phonenumbers
from pydantic import ConfigDict
from pydantic_extra_types.phone_numbers import PhoneNumberValidator
from sqlmodel import Field, SQLModel

from yardloop.core.config import config
from yardloop.schemas.enums import PreferredContact

# stored and returned as +14075550100, national numbers use the default region
E164PhoneNumber = Annotated[
    Union[str, phonenumbers.PhoneNumber],
    PhoneNumberValidator(default_region=config.default_phone_region, number_format="E164"),
]


class UserBase(SQLModel):
    username: str = Field(min_length=1, max_length=200)
    avatarurl: str | None = Field(default=None, max_length=500)


class UserProfileBase(SQLModel):
    bio: str | None = Field(default=None, max_length=2000)
    phone: str | None = Field(default=None, max_length=32)
    preferred_contact: PreferredContact = Field(default=PreferredContact.EMAIL)


class RegisterUserRequest(UserBase):
    model_config = ConfigDict(extra="forbid")


class UserRead(UserBase):
    id: int
    created_at: datetime


class ProfileRead(UserRead, UserProfileBase):
    pass


class ProfileUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    bio: str | None = Field(default=None, max_length=2000)
    phone: E164PhoneNumber | None = None
    preferred_contact: PreferredContact = PreferredContact.EMAIL


# public profile never carries the phone number
class PublicProfile(UserRead):
    bio: str | None = None
    preferred_contact: PreferredContact
    listing_count: int


# this is used to show who checked in to a sale
class CheckedInUser(SQLModel):
    id: int
    username: str
    avatarurl: str | None = None
