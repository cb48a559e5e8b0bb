"""SQL storage backend built on SQLModel.

Each call runs in its own session; multi-row writes such as pairing commit
in a single transaction. ``atomic()`` additionally serializes callers within
this process.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, and_, or_, select

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


class SQLStorage:
    """SQLModel implementation of the Storage protocol."""

    backend_name = "sql"

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._lock = threading.RLock()

    def init(self) -> None:
        SQLModel.metadata.create_all(self._engine)
        logger.debug("SQL storage ready at {}", self._engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            yield

    def _session(self) -> Session:
        return Session(self._engine)

    @staticmethod
    def _require_user(session: Session, user_id: int) -> User:
        user = session.get(User, user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    @staticmethod
    def _save(session: Session, *objs):
        for obj in objs:
            session.add(obj)
        session.commit()
        for obj in objs:
            session.refresh(obj)

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._session() as session:
            return session.get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session() as session:
            return session.exec(select(User).where(User.username == username)).first()

    def create_user(self, data: UserCreate) -> User:
        with self._lock, self._session() as session:
            if session.exec(select(User).where(User.username == data.username)).first():
                raise InvalidInput(f"Username {data.username!r} is already taken")
            user = User(
                username=data.username,
                password=data.password,
                partner_id=None,
                preferences=data.preferences.model_dump() if data.preferences else None,
            )
            try:
                self._save(session, user)
            except IntegrityError as e:
                session.rollback()
                raise InvalidInput(f"Username {data.username!r} is already taken") from e
            return user

    def update_user_preferences(self, user_id: int, preferences: Optional[Preferences]) -> User:
        with self._session() as session:
            user = self._require_user(session, user_id)
            user.preferences = preferences.model_dump() if preferences is not None else None
            self._save(session, user)
            return user

    def update_user_partner(self, user_id: int, partner_id: Optional[int]) -> User:
        with self._session() as session:
            user = self._require_user(session, user_id)
            user.partner_id = partner_id
            self._save(session, user)
            return user

    def pair_users(self, user_a: int, user_b: int) -> tuple[User, User]:
        with self._lock, self._session() as session:
            a = self._require_user(session, user_a)
            b = self._require_user(session, user_b)
            a.partner_id = b.id
            b.partner_id = a.id
            self._save(session, a, b)
            return a, b

    def unpair_user(self, user_id: int) -> User:
        with self._lock, self._session() as session:
            user = self._require_user(session, user_id)
            changed = [user]
            if user.partner_id is not None:
                partner = session.get(User, user.partner_id)
                if partner is not None and partner.partner_id == user.id:
                    partner.partner_id = None
                    changed.append(partner)
            user.partner_id = None
            self._save(session, *changed)
            return user

    # Swipes

    def add_movie_swipe(self, data: SwipeCreate) -> Swipe:
        with self._session() as session:
            swipe = Swipe.model_validate(data)
            self._save(session, swipe)
            return swipe

    def get_matching_movies(self, user_a: int, user_b: int) -> set[int]:
        with self._session() as session:

            def liked(user_id: int) -> set[int]:
                stmt = select(Swipe.tmdb_id).where(Swipe.user_id == user_id, Swipe.liked == True)  # noqa: E712
                return set(session.exec(stmt).all())

            return liked(user_a) & liked(user_b)

    # Matches

    def create_match(self, data: MatchCreate) -> Match:
        with self._session() as session:
            match = Match.model_validate(data)
            self._save(session, match)
            return match

    def find_match(self, tmdb_id: int, user_a: int, user_b: int) -> Optional[Match]:
        with self._session() as session:
            stmt = select(Match).where(
                Match.tmdb_id == tmdb_id,
                or_(
                    and_(Match.user1_id == user_a, Match.user2_id == user_b),
                    and_(Match.user1_id == user_b, Match.user2_id == user_a),
                ),
            )
            return session.exec(stmt).first()

    def get_matches(self, user_id: int) -> list[Match]:
        with self._session() as session:
            stmt = (
                select(Match)
                .where(or_(Match.user1_id == user_id, Match.user2_id == user_id))
                .order_by(Match.id)
            )
            return list(session.exec(stmt).all())

    # Partner requests

    def create_partner_request(self, data: PartnerRequestCreate) -> PartnerRequest:
        with self._session() as session:
            request = PartnerRequest(
                sender_id=data.sender_id,
                receiver_username=data.receiver_username,
                status=PartnerRequestStatus.PENDING,
            )
            self._save(session, request)
            return request

    def get_partner_request(self, request_id: int) -> Optional[PartnerRequest]:
        with self._session() as session:
            return session.get(PartnerRequest, request_id)

    def get_partner_requests(self, user_id: int) -> list[PartnerRequest]:
        with self._session() as session:
            user = session.get(User, user_id)
            condition = PartnerRequest.sender_id == user_id
            if user is not None:
                condition = or_(condition, PartnerRequest.receiver_username == user.username)
            stmt = select(PartnerRequest).where(condition).order_by(PartnerRequest.id)
            return list(session.exec(stmt).all())

    def update_partner_request(self, request_id: int, status: PartnerRequestStatus) -> PartnerRequest:
        with self._session() as session:
            request = session.get(PartnerRequest, request_id)
            if request is None:
                raise NotFound(f"Partner request {request_id} not found")
            request.status = status
            self._save(session, request)
            return request
