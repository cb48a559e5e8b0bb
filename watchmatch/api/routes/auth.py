from typing import Any

from fastapi import APIRouter, HTTPException, status
from loguru import logger

from watchmatch.api import deps
from watchmatch.core.security import create_access_token, hash_password, verify_password
from watchmatch.models import UserCreate
from watchmatch.schemas.msg import Msg
from watchmatch.schemas.user import Credentials, Token, UserPublic

router = APIRouter()


@router.post("/register", response_model=UserPublic)
def register(storage: deps.StorageDep, body: Credentials) -> Any:
    """
    Create an account. Usernames are unique and case-sensitive.
    """
    user = storage.create_user(
        UserCreate(username=body.username, password=hash_password(body.password))
    )
    logger.info("Registered user {} ({!r})", user.id, user.username)
    return user


@router.post("/login", response_model=Token)
def login(storage: deps.StorageDep, body: Credentials) -> Any:
    user = storage.get_user_by_username(body.username)
    if not user or not verify_password(body.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "access_token": create_access_token(user.id),
        "token_type": "bearer",
        "user": user,
    }


@router.post("/logout", response_model=Msg)
def logout() -> Any:
    # Tokens are stateless; the client drops its copy
    return {"message": "Logged out"}


@router.get("/user", response_model=UserPublic)
def read_current_user(current_user: deps.CurrentUser) -> Any:
    return current_user
