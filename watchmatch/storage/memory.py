"""In-memory storage backend.

Data lives for the lifetime of the process. Every entity type has its own
id counter, all maps are guarded by a single re-entrant lock, and callers
always receive copies so nothing outside this module mutates stored rows.
"""

import itertools
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, TypeVar

from loguru import logger
from sqlmodel import SQLModel

from watchmatch.core.errors import InvalidInput, NotFound
from watchmatch.models import (
    Match,
    MatchCreate,
    PartnerRequest,
    PartnerRequestCreate,
    PartnerRequestStatus,
    Preferences,
    Swipe,
    SwipeCreate,
    User,
    UserCreate,
)

T = TypeVar("T", bound=SQLModel)


def _copy(obj: T) -> T:
    return type(obj).model_validate(obj.model_dump())


class MemoryStorage:
    """Dict-backed implementation of the Storage protocol."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[int, User] = {}
        self._swipes: dict[int, Swipe] = {}
        self._matches: dict[int, Match] = {}
        self._partner_requests: dict[int, PartnerRequest] = {}
        self._ids = {
            User: itertools.count(1),
            Swipe: itertools.count(1),
            Match: itertools.count(1),
            PartnerRequest: itertools.count(1),
        }

    def init(self) -> None:
        logger.debug("Memory storage ready")

    def close(self) -> None:
        with self._lock:
            logger.info(
                "Discarding in-memory data: {} users, {} swipes, {} matches, {} partner requests",
                len(self._users),
                len(self._swipes),
                len(self._matches),
                len(self._partner_requests),
            )

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            yield

    def _next_id(self, model: type) -> int:
        return next(self._ids[model])

    def _require_user(self, user_id: int) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    def _replace_user(self, user: User, **changes) -> User:
        updated = User.model_validate({**user.model_dump(), **changes})
        self._users[updated.id] = updated
        return updated

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return _copy(user) if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return _copy(user)
            return None

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            if any(u.username == data.username for u in self._users.values()):
                raise InvalidInput(f"Username {data.username!r} is already taken")
            user = User(
                id=self._next_id(User),
                username=data.username,
                password=data.password,
                partner_id=None,
                preferences=data.preferences.model_dump() if data.preferences else None,
            )
            self._users[user.id] = user
            return _copy(user)

    def update_user_preferences(self, user_id: int, preferences: Optional[Preferences]) -> User:
        with self._lock:
            user = self._require_user(user_id)
            prefs = preferences.model_dump() if preferences is not None else None
            return _copy(self._replace_user(user, preferences=prefs))

    def update_user_partner(self, user_id: int, partner_id: Optional[int]) -> User:
        with self._lock:
            user = self._require_user(user_id)
            return _copy(self._replace_user(user, partner_id=partner_id))

    def pair_users(self, user_a: int, user_b: int) -> tuple[User, User]:
        with self._lock:
            a = self._require_user(user_a)
            b = self._require_user(user_b)
            a = self._replace_user(a, partner_id=b.id)
            b = self._replace_user(b, partner_id=a.id)
            return _copy(a), _copy(b)

    def unpair_user(self, user_id: int) -> User:
        with self._lock:
            user = self._require_user(user_id)
            partner = self._users.get(user.partner_id) if user.partner_id else None
            if partner is not None and partner.partner_id == user.id:
                self._replace_user(partner, partner_id=None)
            return _copy(self._replace_user(user, partner_id=None))

    # Swipes

    def add_movie_swipe(self, data: SwipeCreate) -> Swipe:
        with self._lock:
            swipe = Swipe(id=self._next_id(Swipe), **data.model_dump())
            self._swipes[swipe.id] = swipe
            return _copy(swipe)

    def _liked_by(self, user_id: int) -> set[int]:
        return {s.tmdb_id for s in self._swipes.values() if s.user_id == user_id and s.liked}

    def get_matching_movies(self, user_a: int, user_b: int) -> set[int]:
        with self._lock:
            return self._liked_by(user_a) & self._liked_by(user_b)

    # Matches

    def create_match(self, data: MatchCreate) -> Match:
        with self._lock:
            match = Match(id=self._next_id(Match), **data.model_dump())
            self._matches[match.id] = match
            return _copy(match)

    def find_match(self, tmdb_id: int, user_a: int, user_b: int) -> Optional[Match]:
        with self._lock:
            for match in self._matches.values():
                if match.tmdb_id == tmdb_id and match.pairs(user_a, user_b):
                    return _copy(match)
            return None

    def get_matches(self, user_id: int) -> list[Match]:
        with self._lock:
            return [
                _copy(m)
                for m in self._matches.values()
                if m.user1_id == user_id or m.user2_id == user_id
            ]

    # Partner requests

    def create_partner_request(self, data: PartnerRequestCreate) -> PartnerRequest:
        with self._lock:
            request = PartnerRequest(
                id=self._next_id(PartnerRequest),
                sender_id=data.sender_id,
                receiver_username=data.receiver_username,
                status=PartnerRequestStatus.PENDING,
            )
            self._partner_requests[request.id] = request
            return _copy(request)

    def get_partner_request(self, request_id: int) -> Optional[PartnerRequest]:
        with self._lock:
            request = self._partner_requests.get(request_id)
            return _copy(request) if request else None

    def get_partner_requests(self, user_id: int) -> list[PartnerRequest]:
        with self._lock:
            user = self._users.get(user_id)
            username = user.username if user else None
            return [
                _copy(r)
                for r in self._partner_requests.values()
                if r.sender_id == user_id or r.receiver_username == username
            ]

    def update_partner_request(self, request_id: int, status: PartnerRequestStatus) -> PartnerRequest:
        with self._lock:
            request = self._partner_requests.get(request_id)
            if request is None:
                raise NotFound(f"Partner request {request_id} not found")
            updated = PartnerRequest.model_validate({**request.model_dump(), "status": status})
            self._partner_requests[request_id] = updated
            return _copy(updated)
