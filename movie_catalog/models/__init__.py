"""SQLAlchemy ORM models."""

from movie_catalog.models.base import Base
from movie_catalog.models.movie import Movie
from movie_catalog.models.user import User

__all__ = ["Base", "Movie", "User"]
