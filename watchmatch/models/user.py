from typing import List, Optional

from pydantic import field_validator
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def _unique(values: List[str]) -> List[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen = {}
    for v in values:
        v = v.strip()
        if v and v not in seen:
            seen[v] = None
    return list(seen)


class Preferences(SQLModel):
    genres: List[str] = []
    platforms: List[str] = []
    favorite_actors: List[str] = []

    @field_validator("genres", "platforms", "favorite_actors")
    @classmethod
    def as_set(cls, v: List[str]) -> List[str]:
        return _unique(v)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password: str

    # Pairing
    partner_id: Optional[int] = Field(default=None, foreign_key="user.id")
    preferences: Optional[dict] = Field(default=None, sa_column=Column(JSON))


class UserCreate(SQLModel):
    username: str = Field(min_length=1)
    # Already hashed by the auth layer
    password: str = Field(min_length=1)
    preferences: Optional[Preferences] = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("username must not be blank")
        return v
