from typing import Any

from fastapi import APIRouter

from watchmatch.api import deps
from watchmatch.schemas.user import PreferencesBody, UserPublic

router = APIRouter()


@router.patch("/preferences", response_model=UserPublic)
def update_preferences(
    storage: deps.StorageDep,
    current_user: deps.CurrentUser,
    body: PreferencesBody,
) -> Any:
    """
    Replace the current user's preferences. Omitted lists are cleared.
    """
    return storage.update_user_preferences(current_user.id, body.to_model())
