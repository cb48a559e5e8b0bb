# Import models to register them on SQLModel.metadata
from .match import Match, MatchCreate
from .partner_request import PartnerRequest, PartnerRequestCreate, PartnerRequestStatus
from .swipe import Swipe, SwipeCreate
from .user import Preferences, User, UserCreate

__all__ = [
    "Match",
    "MatchCreate",
    "PartnerRequest",
    "PartnerRequestCreate",
    "PartnerRequestStatus",
    "Preferences",
    "Swipe",
    "SwipeCreate",
    "User",
    "UserCreate",
]
