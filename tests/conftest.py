import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("TMDB_API_KEY", "test-tmdb-key")

import httpx
import pytest
from fastapi.testclient import TestClient

from watchmatch.api import deps
from watchmatch.core.security import create_access_token, hash_password
from watchmatch.main import app
from watchmatch.models import UserCreate
from watchmatch.services import TmdbCatalog
from watchmatch.storage import create_storage

TMDB_BASE_URL = "https://tmdb.test/3"

GENRES = [
    {"id": 28, "name": "Action"},
    {"id": 35, "name": "Comedy"},
    {"id": 18, "name": "Drama"},
]

MOVIES = {
    42: {
        "id": 42,
        "title": "Arrival",
        "overview": "Linguist meets heptapods.",
        "poster_path": "/arrival.jpg",
        "backdrop_path": "/arrival-bg.jpg",
        "vote_average": 7.9,
        "release_date": "2016-11-11",
    },
    7: {
        "id": 7,
        "title": "Paddington 2",
        "overview": "Marmalade.",
        "poster_path": None,
        "backdrop_path": None,
        "vote_average": 7.8,
        "release_date": "2017-11-10",
    },
}


class FakeTmdb:
    """Scriptable stand-in for the TMDB HTTP API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.discover_results = [MOVIES[42], MOVIES[7]]
        # path -> status codes served (once each) before answering normally
        self.failures: dict[str, list[int]] = {}
        self.connect_errors: dict[str, int] = {}

    def paths(self) -> list[str]:
        return [r.url.path.removeprefix("/3") for r in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/3")

        if self.connect_errors.get(path):
            self.connect_errors[path] -= 1
            raise httpx.ConnectError("connection refused", request=request)
        if self.failures.get(path):
            return httpx.Response(self.failures[path].pop(0), json={"status_message": "nope"})

        if path == "/genre/movie/list":
            return httpx.Response(200, json={"genres": GENRES})
        if path == "/discover/movie":
            page = int(request.url.params.get("page", "1"))
            return httpx.Response(
                200,
                json={"page": page, "results": self.discover_results, "total_pages": 1},
            )
        if path.startswith("/movie/"):
            movie = MOVIES.get(int(path.rsplit("/", 1)[1]))
            if movie is None:
                return httpx.Response(404, json={"status_message": "not found"})
            return httpx.Response(200, json=movie)
        return httpx.Response(404)


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    storage = create_storage(request.param, database_url="sqlite://")
    storage.init()
    yield storage
    storage.close()


@pytest.fixture
def tmdb():
    return FakeTmdb()


@pytest.fixture
def catalog(tmdb):
    client = httpx.Client(transport=httpx.MockTransport(tmdb.handle))
    catalog = TmdbCatalog(
        api_key="test-tmdb-key",
        base_url=TMDB_BASE_URL,
        client=client,
        max_retries=2,
        retry_backoff=0,
    )
    yield catalog
    catalog.close()


@pytest.fixture
def client(storage, catalog):
    app.dependency_overrides[deps.get_storage] = lambda: storage
    app.dependency_overrides[deps.get_catalog] = lambda: catalog
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(storage):
    def _make_user(username="alice", password="secret"):
        return storage.create_user(UserCreate(username=username, password=hash_password(password)))

    return _make_user


def get_auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def auth_headers():
    return get_auth_headers
