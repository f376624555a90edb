"""Python client for the movie catalog API: explicit auth session, token persistence, typed errors."""

from movie_catalog.client.api import CatalogClient
from movie_catalog.client.errors import (
    ApiError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from movie_catalog.client.session import (
    AuthSession,
    FileTokenStore,
    MemoryTokenStore,
    TokenStore,
)

__all__ = [
    "ApiError",
    "AuthSession",
    "BadRequestError",
    "CatalogClient",
    "FileTokenStore",
    "ForbiddenError",
    "MemoryTokenStore",
    "NotFoundError",
    "TokenStore",
    "UnauthorizedError",
]
