from typing import Optional

from sqlmodel import Field, SQLModel


class MatchBase(SQLModel):
    tmdb_id: int = Field(index=True)
    user1_id: int = Field(foreign_key="user.id")
    user2_id: int = Field(foreign_key="user.id")


class Match(MatchBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    def pairs(self, user_a: int, user_b: int) -> bool:
        return {self.user1_id, self.user2_id} == {user_a, user_b}


class MatchCreate(MatchBase):
    pass
