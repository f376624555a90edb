"""Pydantic request/response schemas."""

from movie_catalog.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from movie_catalog.schemas.health import HealthResponse
from movie_catalog.schemas.movies import (
    MovieCreate,
    MovieDeleted,
    MovieOut,
    MoviePage,
    MovieUpdate,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MovieCreate",
    "MovieDeleted",
    "MovieOut",
    "MoviePage",
    "MovieUpdate",
    "RegisterRequest",
    "UserPublic",
]
