from typing import Optional

from watchmatch.schemas.base import CamelModel


class MovieDetail(CamelModel):
    """Catalog movie; validated from TMDB's snake_case, served as camelCase."""

    id: int
    title: str
    overview: str = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: float = 0.0
    release_date: Optional[str] = None


class SwipeIn(CamelModel):
    tmdb_id: int
    liked: bool


class SwipeRead(CamelModel):
    id: int
    user_id: int
    tmdb_id: int
    liked: bool


class SwipeResult(SwipeRead):
    match: bool
    movie_title: Optional[str] = None


class MatchRead(CamelModel):
    id: int
    tmdb_id: int
    user1_id: int
    user2_id: int
