"""HTTP client for the movie catalog API (httpx), bound to an explicit AuthSession."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from movie_catalog.client.errors import ApiError, UnauthorizedError, error_for_status
from movie_catalog.client.session import AuthSession

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0


def _error_message(resp: httpx.Response) -> str:
    """Human-readable message from an error response ({"detail": ...} or plain text)."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500] if resp.text else f"HTTP {resp.status_code}"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        errors = body.get("errors") or []
        if errors:
            parts = [
                f"{'.'.join(str(p) for p in e.get('loc', [])[1:]) or 'body'}: {e.get('msg', '')}"
                for e in errors
                if isinstance(e, dict)
            ]
            return f"{detail}: " + "; ".join(parts)
        return detail
    if detail is not None:
        return str(detail)[:500]
    return f"HTTP {resp.status_code}"


class CatalogClient:
    """
    Thin wrapper over the REST API.

    Every request carries the session's bearer token when there is one. Any 401
    ends the session (token cleared) before UnauthorizedError is raised; other
    errors are raised for the caller to show where the action started.
    """

    def __init__(
        self,
        base_url: str,
        session: AuthSession,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.session = session
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> CatalogClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        try:
            resp = self._http.request(method, path, params=params, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise ApiError(f"Request to {path} timed out.") from e
        except httpx.HTTPError as e:
            raise ApiError(f"Movie catalog API unreachable: {e!s}") from e
        if resp.status_code == 401:
            self.session.teardown()
            raise UnauthorizedError(_error_message(resp), 401)
        if resp.status_code >= 400:
            logger.debug(
                "API error",
                extra={"method": method, "path": path, "status_code": resp.status_code},
            )
            raise error_for_status(resp.status_code, _error_message(resp))
        return resp.json()

    # auth

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        data = self._request(
            "POST", "/auth/register", json={"name": name, "email": email, "password": password}
        )
        self.session.establish(data["token"], data.get("user"))
        return data

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.session.establish(data["token"], data.get("user"))
        return data

    def logout(self) -> None:
        self.session.teardown()

    # movies

    def list_movies(self, page: int | None = None, limit: int | None = None) -> Any:
        """Array of movies, or a {movies, total, page, totalPages} page when page/limit are given."""
        params = {k: v for k, v in (("page", page), ("limit", limit)) if v is not None}
        return self._request("GET", "/movies", params=params or None)

    def get_movie(self, movie_id: int) -> dict[str, Any]:
        return self._request("GET", f"/movies/{movie_id}")

    def search_movies(self, query: str) -> list[dict[str, Any]]:
        return self._request("GET", "/movies/search", params={"q": query})

    def sort_movies(self, by: str, order: str = "asc") -> list[dict[str, Any]]:
        return self._request("GET", "/movies/sorted", params={"by": by, "order": order})

    def create_movie(self, fields: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/movies", json=fields)

    def update_movie(self, movie_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/movies/{movie_id}", json=fields)

    def delete_movie(self, movie_id: int) -> dict[str, Any]:
        return self._request("DELETE", f"/movies/{movie_id}")
