"""Movie endpoints: public reads (list, search, sorted, by id) and admin-only writes."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from movie_catalog.api.deps import require_admin
from movie_catalog.core.config import settings
from movie_catalog.core.database import get_db
from movie_catalog.schemas.auth import CurrentUser
from movie_catalog.schemas.movies import (
    PAGE_MAX,
    MovieCreate,
    MovieDeleted,
    MovieOut,
    MoviePage,
    MovieUpdate,
)
from movie_catalog.services.movies import (
    InvalidSearchQueryError,
    InvalidSortFieldError,
    MovieNotFoundError,
    create_movie,
    delete_movie,
    get_movie,
    list_movies,
    search_movies,
    sort_movies,
    total_pages,
    update_movie,
)

router = APIRouter()


def _not_found(e: MovieNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("", response_model=list[MovieOut] | MoviePage)
def get_movies(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int | None, Query(ge=1, le=PAGE_MAX)] = None,
    limit: Annotated[int | None, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = None,
) -> list[MovieOut] | MoviePage:
    """
    List movies in insertion order.

    Without query parameters the full array is returned. With page and/or limit
    the response is {movies, total, page, totalPages}.
    """
    if page is None and limit is None:
        movies, _ = list_movies(db)
        return [MovieOut.model_validate(m) for m in movies]
    page = page or 1
    limit = limit or settings.DEFAULT_PAGE_SIZE
    movies, total = list_movies(db, page=page, limit=limit)
    return MoviePage(
        movies=[MovieOut.model_validate(m) for m in movies],
        total=total,
        page=page,
        total_pages=total_pages(total, limit),
    )


# /search and /sorted are declared before /{movie_id} so they are not read as ids.
@router.get("/search", response_model=list[MovieOut])
def get_search(
    db: Annotated[Session, Depends(get_db)],
    q: Annotated[str | None, Query(max_length=200)] = None,
) -> list[MovieOut]:
    """Case-insensitive substring search over title and description."""
    try:
        movies = search_movies(db, q)
    except InvalidSearchQueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return [MovieOut.model_validate(m) for m in movies]


@router.get("/sorted", response_model=list[MovieOut])
def get_sorted(
    db: Annotated[Session, Depends(get_db)],
    by: str | None = None,
    order: Literal["asc", "desc"] = "asc",
) -> list[MovieOut]:
    """All movies sorted by title, rating, releaseDate or duration."""
    try:
        movies = sort_movies(db, by, order)
    except InvalidSortFieldError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return [MovieOut.model_validate(m) for m in movies]


@router.get("/{movie_id}", response_model=MovieOut)
def get_movie_by_id(
    movie_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> MovieOut:
    try:
        return MovieOut.model_validate(get_movie(db, movie_id))
    except MovieNotFoundError as e:
        raise _not_found(e) from e


@router.post("", response_model=MovieOut, status_code=status.HTTP_201_CREATED)
def post_movie(
    body: MovieCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> MovieOut:
    """Create a movie (admin only). Body is validated before anything is stored."""
    return MovieOut.model_validate(create_movie(db, body))


@router.put("/{movie_id}", response_model=MovieOut)
def put_movie(
    movie_id: int,
    body: MovieUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> MovieOut:
    """Update any subset of a movie's fields (admin only)."""
    try:
        return MovieOut.model_validate(update_movie(db, movie_id, body))
    except MovieNotFoundError as e:
        raise _not_found(e) from e


@router.delete("/{movie_id}", response_model=MovieDeleted)
def remove_movie(
    movie_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> MovieDeleted:
    """Delete a movie (admin only); a second delete of the same id returns 404."""
    try:
        deleted = delete_movie(db, movie_id)
    except MovieNotFoundError as e:
        raise _not_found(e) from e
    return MovieDeleted(message="Movie deleted successfully", movie=deleted)
