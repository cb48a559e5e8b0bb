from typing import Any, List

from fastapi import APIRouter

from watchmatch.api import deps
from watchmatch.schemas.movie import MatchRead

router = APIRouter()


@router.get("", response_model=List[MatchRead])
def list_matches(service: deps.SwipeServiceDep, current_user: deps.CurrentUser) -> Any:
    return service.matches(current_user)
