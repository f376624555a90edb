"""Credential issuance: registration, login and token minting."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from movie_catalog.core.security import (
    ROLE_USER,
    create_access_token,
    hash_password,
    verify_password,
)
from movie_catalog.models import User

logger = logging.getLogger(__name__)


class AuthServiceError(Exception):
    """Base class for credential issuance failures; no token is issued."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentialsError(AuthServiceError):
    """Unknown email or password mismatch (deliberately indistinguishable)."""

    def __init__(self, message: str = "Invalid email or password.") -> None:
        super().__init__(message)


class DuplicateAccountError(AuthServiceError):
    """An account with this email already exists."""

    def __init__(self, message: str = "An account with this email already exists.") -> None:
        super().__init__(message)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def register_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Raises DuplicateAccountError if the email is taken, including when a
    concurrent registration wins the unique index race.
    """
    email = email.strip().lower()
    if get_user_by_email(db, email) is not None:
        raise DuplicateAccountError()
    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateAccountError() from e
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "role": user.role})
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Return the user whose stored hash matches password. Raises InvalidCredentialsError."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Login failed", extra={"reason": "invalid_credentials"})
        raise InvalidCredentialsError()
    return user


def issue_token(user: User) -> str:
    """Sign a token embedding the user's id and role."""
    return create_access_token(sub=user.id, role=user.role)
