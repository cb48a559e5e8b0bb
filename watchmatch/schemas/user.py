from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from watchmatch.models import Preferences
from watchmatch.schemas.base import CamelModel


class PreferencesBody(CamelModel):
    genres: List[str] = []
    platforms: List[str] = []
    favorite_actors: List[str] = []

    def to_model(self) -> Preferences:
        return Preferences(
            genres=self.genres,
            platforms=self.platforms,
            favorite_actors=self.favorite_actors,
        )


class UserPublic(CamelModel):
    id: int
    username: str
    partner_id: Optional[int] = None
    preferences: Optional[PreferencesBody] = None


class Credentials(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("username must not be blank")
        return v


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic
