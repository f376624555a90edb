"""Registration and login: exchange credentials for a signed bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from movie_catalog.core.database import get_db
from movie_catalog.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from movie_catalog.services.auth import (
    DuplicateAccountError,
    InvalidCredentialsError,
    authenticate_user,
    issue_token,
    register_user,
)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Create an account with role 'user' and return a token for it.

    Duplicate emails are rejected with 400.
    """
    try:
        user = register_user(db, body.name, body.email, body.password)
    except DuplicateAccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return AuthResponse(token=issue_token(user), user=UserPublic.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        user = authenticate_user(db, body.email, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return AuthResponse(token=issue_token(user), user=UserPublic.model_validate(user))
