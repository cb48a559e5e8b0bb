from .catalog import TmdbCatalog
from .partners import PartnerService
from .swipes import SwipeOutcome, SwipeService

__all__ = ["PartnerService", "SwipeOutcome", "SwipeService", "TmdbCatalog"]
