"""TMDB-backed movie catalog gateway.

Thin proxy over The Movie Database API: discover pages, movie details and
genre-name lookup. Idempotent GETs are retried on transport errors and 5xx
answers with exponential backoff; anything else surfaces as
:class:`~watchmatch.core.errors.UpstreamFailure`.
"""

import time
from typing import Any, Iterable, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from watchmatch.core.config import settings
from watchmatch.core.errors import UpstreamFailure
from watchmatch.schemas.movie import MovieDetail

DISCOVER_DEFAULTS: dict[str, Any] = {
    "language": "en-US",
    "sort_by": "popularity.desc",
    "include_adult": "false",
    "with_original_language": "en",
    "vote_count.gte": 100,
}


class TmdbCatalog:
    """Catalog gateway over an ``httpx.Client``.

    Example:
        ```python
        catalog = TmdbCatalog.create()
        page = catalog.discover(page=1, genre_ids=[28, 35])
        title = catalog.detail(603).title
        ```
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.themoviedb.org/3",
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
        max_retries: int = 2,
        retry_backoff: float = 0.5,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff

    @classmethod
    def create(cls, client: Optional[httpx.Client] = None) -> "TmdbCatalog":
        """Build a catalog from settings."""
        return cls(
            api_key=settings.TMDB_API_KEY,
            base_url=settings.TMDB_BASE_URL,
            client=client,
            timeout=settings.TMDB_TIMEOUT,
            max_retries=settings.TMDB_MAX_RETRIES,
            retry_backoff=settings.TMDB_RETRY_BACKOFF,
        )

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        if not self._api_key:
            raise UpstreamFailure("TMDB_API_KEY is not configured")

        url = f"{self._base_url}{path}"
        query = {"api_key": self._api_key, **(params or {})}
        attempt = 0
        while True:
            try:
                response = self._client.get(url, params=query)
                if response.status_code < 500:
                    response.raise_for_status()
                    return response.json()
                error: Exception = httpx.HTTPStatusError(
                    f"Server error {response.status_code}", request=response.request, response=response
                )
            except httpx.HTTPStatusError as e:
                # 4xx: not worth retrying
                logger.warning("Catalog request {} failed: {}", path, e)
                raise UpstreamFailure(f"Catalog request failed: {e.response.status_code}") from e
            except (httpx.TransportError, ValueError) as e:
                error = e

            if attempt >= self._max_retries:
                logger.warning("Catalog request {} failed after {} attempts: {}", path, attempt + 1, error)
                raise UpstreamFailure(f"Catalog unavailable: {error}") from error
            delay = self._retry_backoff * (2**attempt)
            attempt += 1
            logger.warning("Catalog request {} failed ({}), retry {} in {:.2f}s", path, error, attempt, delay)
            time.sleep(delay)

    def discover(self, page: int = 1, genre_ids: Optional[Iterable[int]] = None) -> dict[str, Any]:
        """One page of popular English-language movies, optionally genre-filtered."""
        params: dict[str, Any] = {**DISCOVER_DEFAULTS, "page": page}
        ids = list(genre_ids or [])
        if ids:
            params["with_genres"] = "|".join(str(i) for i in ids)
        return self._get("/discover/movie", params)

    def detail(self, movie_id: int) -> MovieDetail:
        data = self._get(f"/movie/{movie_id}", {"language": "en-US"})
        try:
            return MovieDetail.model_validate(data)
        except ValidationError as e:
            raise UpstreamFailure(f"Unexpected catalog payload for movie {movie_id}") from e

    def genre_ids_for(self, names: Iterable[str]) -> list[int]:
        """Map genre names to TMDB ids, case-insensitively.

        Unknown names are dropped. If the genre list cannot be fetched the
        result is empty, so callers fall back to unfiltered discovery.
        """
        try:
            data = self._get("/genre/movie/list")
        except UpstreamFailure as e:
            logger.warning("Genre lookup failed, discovering without filter: {}", e)
            return []

        genre_map = {g["name"].lower(): g["id"] for g in data.get("genres", [])}
        return [genre_map[n.lower()] for n in names if n.lower() in genre_map]
