"""Auth dependencies: bearer token verification (get_current_user) and role gates (require_admin)."""

from collections.abc import Callable
from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from movie_catalog.core.security import ROLE_ADMIN, ROLES, decode_access_token
from movie_catalog.schemas.auth import CurrentUser

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _claims_to_user(payload: dict[str, Any]) -> CurrentUser:
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    role = payload.get("role")
    if role not in ROLES:
        raise _unauthorized("Invalid token payload")
    return CurrentUser(id=user_id, role=role)


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return its claims. Raises 401 if missing or invalid.

    Identity comes from the signed claims alone; there is no user lookup, so a
    token stays usable until it expires even if the account changes.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    current_user = _claims_to_user(payload)
    request.state.claims = payload
    return current_user


def require_role(role: str) -> Callable[[CurrentUser], CurrentUser]:
    """Build a dependency that admits only callers whose token claims the given role (403 otherwise)."""

    def _require_role(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{role.capitalize()} access required",
            )
        return current_user

    return _require_role


require_admin = require_role(ROLE_ADMIN)
