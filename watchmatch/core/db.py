from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from watchmatch.core.config import settings


def make_engine(url: str | None = None) -> Engine:
    url = url or settings.SQLALCHEMY_DATABASE_URI
    if url.startswith("sqlite"):
        # Requests are served from a thread pool
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)
