from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from watchmatch.api import deps
from watchmatch.schemas.movie import MovieDetail, SwipeIn, SwipeResult

router = APIRouter()


@router.get("/discover")
def discover_movies(
    catalog: deps.CatalogDep,
    current_user: deps.OptionalUser,
    page: int = Query(1, ge=1),
) -> Any:
    """
    A page of popular movies, filtered by the user's genres when signed in.
    """
    genres = ((current_user.preferences or {}).get("genres") or []) if current_user else []
    genre_ids = catalog.genre_ids_for(genres) if genres else None

    data = catalog.discover(page=page, genre_ids=genre_ids)
    if not data.get("results"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No movies found")
    return data


@router.post("/swipe", response_model=SwipeResult, response_model_exclude_none=True)
def swipe(
    service: deps.SwipeServiceDep,
    current_user: deps.CurrentUser,
    body: SwipeIn,
) -> Any:
    """
    Record a like/dislike. Reports whether it completed a match with your partner.
    """
    outcome = service.record(current_user, body.tmdb_id, body.liked)
    return SwipeResult(
        **outcome.swipe.model_dump(),
        match=outcome.is_match,
        movie_title=outcome.movie_title,
    )


@router.get("/{movie_id}", response_model=MovieDetail)
def movie_detail(catalog: deps.CatalogDep, movie_id: int) -> Any:
    return catalog.detail(movie_id)
