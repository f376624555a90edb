"""Movie collection access: CRUD, substring search and allow-listed sorting."""

import logging
import math
from typing import Any, Literal

from sqlalchemy import or_
from sqlalchemy.orm import Session

from movie_catalog.core.config import get_settings
from movie_catalog.models import Movie
from movie_catalog.schemas.movies import (
    MOVIE_ID_MAX,
    SORT_FIELDS,
    MovieCreate,
    MovieOut,
    MovieUpdate,
)

logger = logging.getLogger(__name__)

SortOrder = Literal["asc", "desc"]

# Escape character for LIKE patterns built from user input.
LIKE_ESCAPE = "\\"


class MovieServiceError(Exception):
    """Base class for movie collection errors surfaced to the caller."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MovieNotFoundError(MovieServiceError):
    """No movie with the requested id."""

    def __init__(self, movie_id: int) -> None:
        self.movie_id = movie_id
        super().__init__("Movie not found")


class InvalidSortFieldError(MovieServiceError):
    """Sort field outside the allow-list."""

    def __init__(self, field: str | None) -> None:
        self.field = field
        allowed = ", ".join(sorted({k for k in SORT_FIELDS if k != "release_date"}))
        super().__init__(f"Invalid sort field {field!r}; allowed: {allowed}")


class InvalidSearchQueryError(MovieServiceError):
    """Empty or blank search text."""

    def __init__(self) -> None:
        super().__init__("Search query is required")


def total_pages(total: int, limit: int) -> int:
    """Number of pages of size limit needed for total items (0 when empty)."""
    return math.ceil(total / limit) if total > 0 else 0


def list_movies(
    db: Session,
    page: int | None = None,
    limit: int | None = None,
) -> tuple[list[Movie], int]:
    """
    Return (movies, total) in insertion order.

    Without page and limit every movie is returned; otherwise the requested
    page slice is returned alongside the unpaginated total.
    """
    query = db.query(Movie).order_by(Movie.id.asc())
    total = query.count()
    if page is None and limit is None:
        return query.all(), total
    page = page or 1
    limit = limit or get_settings().DEFAULT_PAGE_SIZE
    offset = (page - 1) * limit
    return query.offset(offset).limit(limit).all(), total


def get_movie(db: Session, movie_id: int) -> Movie:
    if not 1 <= movie_id <= MOVIE_ID_MAX:
        raise MovieNotFoundError(movie_id)
    movie = db.get(Movie, movie_id)
    if movie is None:
        raise MovieNotFoundError(movie_id)
    return movie


def create_movie(db: Session, data: MovieCreate) -> Movie:
    """Persist a validated movie and return it with generated id and timestamps."""
    movie = Movie(**data.model_dump())
    db.add(movie)
    db.commit()
    db.refresh(movie)
    logger.info("Movie created", extra={"movie_id": movie.id})
    return movie


def update_movie(db: Session, movie_id: int, changes: MovieUpdate) -> Movie:
    """Apply only the fields present in the request body."""
    movie = get_movie(db, movie_id)
    fields: dict[str, Any] = changes.model_dump(exclude_unset=True)
    for name, value in fields.items():
        setattr(movie, name, value)
    db.commit()
    db.refresh(movie)
    logger.info(
        "Movie updated",
        extra={"movie_id": movie.id, "fields": sorted(fields)},
    )
    return movie


def delete_movie(db: Session, movie_id: int) -> MovieOut:
    """Delete a movie and return a snapshot of it. Raises MovieNotFoundError if absent."""
    movie = get_movie(db, movie_id)
    snapshot = MovieOut.model_validate(movie)
    db.delete(movie)
    db.commit()
    logger.info("Movie deleted", extra={"movie_id": movie_id})
    return snapshot


def _like_pattern(text: str) -> str:
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def search_movies(db: Session, q: str | None) -> list[Movie]:
    """Case-insensitive substring match on title or description."""
    if q is None or not q.strip():
        raise InvalidSearchQueryError()
    pattern = _like_pattern(q.strip())
    return (
        db.query(Movie)
        .filter(
            or_(
                Movie.title.ilike(pattern, escape=LIKE_ESCAPE),
                Movie.description.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
        .order_by(Movie.id.asc())
        .all()
    )


def sort_movies(db: Session, by: str | None, order: SortOrder = "asc") -> list[Movie]:
    """
    Return all movies sorted by an allow-listed field.

    Missing values sort lowest and ties fall back to id in the same direction,
    so the descending result is the exact reverse of the ascending one.
    """
    attr = SORT_FIELDS.get(by or "")
    if attr is None:
        raise InvalidSortFieldError(by)
    column = getattr(Movie, attr)
    if order == "desc":
        ordering = (column.desc().nulls_last(), Movie.id.desc())
    else:
        ordering = (column.asc().nulls_first(), Movie.id.asc())
    return db.query(Movie).order_by(*ordering).all()
