from pydantic import ConfigDict, field_validator
from sqlmodel import Field, SQLModel


class CategoryCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class CategoryRead(SQLModel):
    id: int
    name: str
