"""Swipe recording and match detection."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from watchmatch.core.errors import UpstreamFailure
from watchmatch.models import Match, MatchCreate, Swipe, SwipeCreate, User
from watchmatch.services.catalog import TmdbCatalog
from watchmatch.storage import Storage


@dataclass(frozen=True)
class SwipeOutcome:
    swipe: Swipe
    match: Optional[Match] = None
    movie_title: Optional[str] = None

    @property
    def is_match(self) -> bool:
        return self.match is not None


class SwipeService:
    def __init__(self, storage: Storage, catalog: TmdbCatalog) -> None:
        self._storage = storage
        self._catalog = catalog

    def record(self, user: User, tmdb_id: int, liked: bool) -> SwipeOutcome:
        """Store a swipe and create a match if the partner liked the movie too.

        The swipe write and the match check share one critical section, so
        each (movie, pair) gets at most one Match however often it is liked.
        """
        with self._storage.atomic():
            swipe = self._storage.add_movie_swipe(SwipeCreate(user_id=user.id, tmdb_id=tmdb_id, liked=liked))
            match = self._detect_match(user.id, tmdb_id) if liked else None

        if match is None:
            return SwipeOutcome(swipe=swipe)

        return SwipeOutcome(swipe=swipe, match=match, movie_title=self._title(tmdb_id))

    def _detect_match(self, user_id: int, tmdb_id: int) -> Optional[Match]:
        # Partner is read inside the critical section
        user = self._storage.get_user(user_id)
        if user is None or user.partner_id is None:
            return None
        partner_id = user.partner_id

        if tmdb_id not in self._storage.get_matching_movies(user_id, partner_id):
            return None
        if self._storage.find_match(tmdb_id, user_id, partner_id) is not None:
            return None

        match = self._storage.create_match(MatchCreate(tmdb_id=tmdb_id, user1_id=user_id, user2_id=partner_id))
        logger.info("Match {}: users {} and {} both liked movie {}", match.id, user_id, partner_id, tmdb_id)
        return match

    def _title(self, tmdb_id: int) -> Optional[str]:
        try:
            return self._catalog.detail(tmdb_id).title
        except UpstreamFailure as e:
            logger.warning("Could not fetch title for matched movie {}: {}", tmdb_id, e)
            return None

    def matches(self, user: User) -> list[Match]:
        return self._storage.get_matches(user.id)
