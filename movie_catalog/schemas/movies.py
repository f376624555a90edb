"""Pydantic schemas for movie input validation and responses."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 10_000
POSTER_MAX_LENGTH = 2048
RATING_MIN = 0
RATING_MAX = 10
# Movie ids are 32-bit INTEGER primary keys; larger path values can never exist.
MOVIE_ID_MAX = 2**31 - 1
# Keeps (page - 1) * limit well inside a 64-bit OFFSET.
PAGE_MAX = 1_000_000

# Public sort keys (camelCase as sent by clients) -> ORM attribute names.
SORT_FIELDS: dict[str, str] = {
    "title": "title",
    "rating": "rating",
    "releaseDate": "release_date",
    "release_date": "release_date",
    "duration": "duration",
}

_CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "ignore",
}


def _clean_title(value: str | None) -> str:
    if value is None:
        raise ValueError("title is required")
    value = value.strip()
    if not value:
        raise ValueError("title must not be blank")
    return value


class MovieCreate(BaseModel):
    """Body for POST /movies. Unknown fields are ignored."""

    model_config = _CAMEL_CONFIG

    title: str = Field(..., max_length=TITLE_MAX_LENGTH, description="Movie title (required).")
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    rating: float | None = Field(
        default=None,
        ge=RATING_MIN,
        le=RATING_MAX,
        description="Rating in range 0–10.",
    )
    release_date: date | None = Field(default=None, description="Release date (YYYY-MM-DD).")
    duration: int | None = Field(default=None, gt=0, description="Duration in whole minutes.")
    poster: str | None = Field(
        default=None,
        max_length=POSTER_MAX_LENGTH,
        description="Poster image URL.",
    )

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: str | None) -> str:
        if v is not None and not isinstance(v, str):
            raise ValueError("title must be a string")
        return _clean_title(v)


class MovieUpdate(BaseModel):
    """Body for PUT /movies/{id}: any subset of movie fields. Title cannot be cleared."""

    model_config = _CAMEL_CONFIG

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    rating: float | None = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    release_date: date | None = None
    duration: int | None = Field(default=None, gt=0)
    poster: str | None = Field(default=None, max_length=POSTER_MAX_LENGTH)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: str | None) -> str:
        if v is not None and not isinstance(v, str):
            raise ValueError("title must be a string")
        return _clean_title(v)


class MovieOut(BaseModel):
    """Movie as returned by the API."""

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}

    id: int
    title: str
    description: str | None = None
    rating: float | None = None
    release_date: date | None = None
    duration: int | None = None
    poster: str | None = None
    created_at: datetime
    updated_at: datetime


class MoviePage(BaseModel):
    """Paginated GET /movies response."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    movies: list[MovieOut]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)


class MovieDeleted(BaseModel):
    """Confirmation returned by DELETE /movies/{id}."""

    message: str
    movie: MovieOut
