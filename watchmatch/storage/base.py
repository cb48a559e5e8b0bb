"""Repository protocol for WatchMatch entities.

Any backend that implements these methods satisfies the protocol through
structural typing, no inheritance needed. Two backends ship with the
package: :class:`~watchmatch.storage.memory.MemoryStorage` (process
lifetime only) and :class:`~watchmatch.storage.sql.SQLStorage`.

Lookups return ``None`` for unknown ids; updates raise
:class:`~watchmatch.core.errors.NotFound`.
"""

from typing import ContextManager, Optional, Protocol, runtime_checkable

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


@runtime_checkable
class Storage(Protocol):
    backend_name: str

    def init(self) -> None:
        """Prepare the backend (create tables, etc.)."""
        ...

    def close(self) -> None:
        """Release backend resources."""
        ...

    def atomic(self) -> ContextManager[None]:
        """Critical section spanning several storage calls.

        Re-entrant: storage methods called inside it do not deadlock.
        """
        ...

    # Users
    def get_user(self, user_id: int) -> Optional[User]: ...

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Exact, case-sensitive lookup."""
        ...

    def create_user(self, data: UserCreate) -> User:
        """Create a user with no partner.

        Raises:
            InvalidInput: if the username is already taken
        """
        ...

    def update_user_preferences(self, user_id: int, preferences: Optional[Preferences]) -> User:
        """Replace (not merge) the user's preferences."""
        ...

    def update_user_partner(self, user_id: int, partner_id: Optional[int]) -> User:
        """Set one side of a pairing. ``partner_id`` itself is not validated."""
        ...

    def pair_users(self, user_a: int, user_b: int) -> tuple[User, User]:
        """Point both users at each other in one step."""
        ...

    def unpair_user(self, user_id: int) -> User:
        """Clear the user's partner, and the partner's back-reference."""
        ...

    # Swipes
    def add_movie_swipe(self, data: SwipeCreate) -> Swipe: ...

    def get_matching_movies(self, user_a: int, user_b: int) -> set[int]:
        """Movie ids both users have liked at least once."""
        ...

    # Matches
    def create_match(self, data: MatchCreate) -> Match:
        """Persist a match. Does not check for duplicates."""
        ...

    def find_match(self, tmdb_id: int, user_a: int, user_b: int) -> Optional[Match]:
        """Existing match for the movie and the unordered user pair."""
        ...

    def get_matches(self, user_id: int) -> list[Match]:
        """Matches involving the user, in insertion order."""
        ...

    # Partner requests
    def create_partner_request(self, data: PartnerRequestCreate) -> PartnerRequest:
        """Persist a request; the status is always ``pending``."""
        ...

    def get_partner_request(self, request_id: int) -> Optional[PartnerRequest]: ...

    def get_partner_requests(self, user_id: int) -> list[PartnerRequest]:
        """Requests sent by the user or addressed to their current username."""
        ...

    def update_partner_request(self, request_id: int, status: PartnerRequestStatus) -> PartnerRequest:
        """Overwrite the status unconditionally."""
        ...
