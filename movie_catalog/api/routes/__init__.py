"""HTTP routes. Paths are unversioned (/auth, /movies, /health)."""

from fastapi import APIRouter

from movie_catalog.api.routes import auth, health, movies

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(movies.router, prefix="/movies", tags=["movies"])
