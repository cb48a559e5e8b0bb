from typing import Optional

from sqlmodel import Field, SQLModel


class SwipeBase(SQLModel):
    user_id: int = Field(foreign_key="user.id", index=True)
    tmdb_id: int
    liked: bool


class Swipe(SwipeBase, table=True):
    """A user's like/dislike on one catalog movie. Never updated or deleted."""

    id: Optional[int] = Field(default=None, primary_key=True)


class SwipeCreate(SwipeBase):
    pass
