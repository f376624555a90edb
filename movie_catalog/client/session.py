"""
Client-side auth state.

An AuthSession is created once and handed to whatever needs it (the API client,
the CLI commands). It has an explicit start (initialize: restore and decode a
persisted token) and an explicit end (teardown: forget the token everywhere).
The decoded role only decides what the client offers; the server re-checks it.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

import jwt

from movie_catalog.client.errors import ForbiddenError

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"


class TokenStore(Protocol):
    """Where a session's token and user profile are persisted between runs."""

    def load(self) -> dict[str, Any] | None: ...

    def save(self, data: dict[str, Any]) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    """Non-persistent store, for tests and one-shot scripts."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = dict(data) if data else None

    def load(self) -> dict[str, Any] | None:
        return dict(self._data) if self._data else None

    def save(self, data: dict[str, Any]) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = None


class FileTokenStore:
    """JSON file holding {"token": ..., "user": {...}}; written with owner-only permissions."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any] | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable session file", extra={"path": str(self.path)})
            return None
        return data if isinstance(data, dict) else None

    def save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # O_CREAT mode does not apply to an existing file.
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(data))

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def decode_claims(token: str) -> dict[str, Any]:
    """
    Read a token's claims without verifying its signature (the client has no key).
    Raises jwt.PyJWTError if the token is not a well-formed JWT.
    """
    return jwt.decode(token, options={"verify_signature": False})


def _is_expired(claims: dict[str, Any], now: datetime | None = None) -> bool:
    exp = claims.get("exp")
    if exp is None:
        return True
    now = now or datetime.now(UTC)
    return float(exp) <= now.timestamp()


class AuthSession:
    """The current user as seen by the client: token, decoded claims and profile."""

    def __init__(self, store: TokenStore) -> None:
        self._store = store
        self._token: str | None = None
        self._claims: dict[str, Any] = {}
        self._user: dict[str, Any] | None = None

    def initialize(self, now: datetime | None = None) -> bool:
        """
        Restore a persisted session. Malformed or expired tokens are discarded.
        Returns True if the session is authenticated afterwards.
        """
        data = self._store.load()
        token = (data or {}).get("token")
        if not token:
            return False
        try:
            claims = decode_claims(token)
        except jwt.PyJWTError:
            logger.info("Discarding malformed persisted token")
            self.teardown()
            return False
        if _is_expired(claims, now):
            logger.info("Discarding expired persisted token")
            self.teardown()
            return False
        self._token = token
        self._claims = claims
        self._user = data.get("user")
        return True

    def establish(self, token: str, user: dict[str, Any] | None = None) -> None:
        """Adopt a freshly issued token (after login/register) and persist it."""
        claims = decode_claims(token)
        self._token = token
        self._claims = claims
        self._user = user
        self._store.save({"token": token, "user": user})

    def teardown(self) -> None:
        """End the session: forget the token in memory and in the store."""
        self._token = None
        self._claims = {}
        self._user = None
        self._store.clear()

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def claims(self) -> dict[str, Any]:
        return dict(self._claims)

    @property
    def user(self) -> dict[str, Any] | None:
        return self._user

    @property
    def role(self) -> str | None:
        return self._claims.get("role")

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == ROLE_ADMIN

    def require_admin(self) -> None:
        """Guard for admin-only client actions; the API enforces the same rule independently."""
        if not self.is_admin:
            raise ForbiddenError("Admin access required")
