from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from watchmatch.core.config import settings
from watchmatch.core.security import decode_access_token
from watchmatch.models import User
from watchmatch.services import PartnerService, SwipeService, TmdbCatalog
from watchmatch.storage import Storage

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_STR}/auth/login", auto_error=False
)


def get_storage(request: Request) -> Storage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Storage not initialized. Check lifespan setup.")
    return storage


def get_catalog(request: Request) -> TmdbCatalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise RuntimeError("Catalog not initialized. Check lifespan setup.")
    return catalog


StorageDep = Annotated[Storage, Depends(get_storage)]
CatalogDep = Annotated[TmdbCatalog, Depends(get_catalog)]
TokenDep = Annotated[Optional[str], Depends(reusable_oauth2)]


def get_optional_user(storage: StorageDep, token: TokenDep) -> Optional[User]:
    """The authenticated user, or None when the request carries no valid token."""
    if not token:
        return None
    user_id = decode_access_token(token)
    if user_id is None:
        return None
    return storage.get_user(user_id)


def get_current_user(user: Annotated[Optional[User], Depends(get_optional_user)]) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
CurrentUser = Annotated[User, Depends(get_current_user)]


def get_partner_service(storage: StorageDep) -> PartnerService:
    return PartnerService(storage)


def get_swipe_service(storage: StorageDep, catalog: CatalogDep) -> SwipeService:
    return SwipeService(storage, catalog)


PartnerServiceDep = Annotated[PartnerService, Depends(get_partner_service)]
SwipeServiceDep = Annotated[SwipeService, Depends(get_swipe_service)]
