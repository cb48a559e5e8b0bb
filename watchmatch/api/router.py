from typing import Any

from fastapi import APIRouter

from watchmatch.api import deps
from watchmatch.api.routes import auth, matches, movies, partners, users
from watchmatch.core.config import settings

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/user", tags=["user"])
api_router.include_router(partners.router, prefix="/partner", tags=["partner"])
api_router.include_router(movies.router, prefix="/movies", tags=["movies"])
api_router.include_router(matches.router, prefix="/matches", tags=["matches"])

@api_router.get("/")
def root():
    return {"message": f"{settings.PROJECT_NAME} API"}

@api_router.get("/health")
def health(storage: deps.StorageDep) -> Any:
    return {"status": "ok", "storage": storage.backend_name}
