from sqlmodel import Field, SQLModel


class PhotoBase(SQLModel):
    url: str | None = Field(default=None, max_length=1000)
    is_primary: bool = Field(default=False)
    position: int = Field(default=0, ge=0)


class PhotoRead(SQLModel):
    id: int
    url: str
    is_primary: bool
    position: int


MAX_PHOTOS = 10


def check_primary_index(photos: list[str] | None, primary_index: int) -> None:
    """The primary photo has to point at one of the uploaded urls."""
    if photos and not 0 <= primary_index < len(photos):
        raise ValueError(
            f"primary_index {primary_index} is out of range for {len(photos)} photos."
        )
