"""Tests for movie_catalog.client: AuthSession lifecycle, token stores, CatalogClient and CLI gating."""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import jwt

from movie_catalog.client import (
    AuthSession,
    BadRequestError,
    CatalogClient,
    FileTokenStore,
    ForbiddenError,
    MemoryTokenStore,
    NotFoundError,
    UnauthorizedError,
)
from movie_catalog.client.cli import main, run
from movie_catalog.client.config import ClientSettings


def _token(role: str = "user", expires_in: timedelta = timedelta(hours=1), user_id: int = 1) -> str:
    """Any-key JWT; the client reads claims without verifying signatures."""
    now = datetime.now(UTC)
    return jwt.encode(
        {"sub": str(user_id), "id": user_id, "role": role, "iat": now, "exp": now + expires_in},
        "client-test-key",
        algorithm="HS256",
    )


def _auth_body(role: str = "user") -> dict:
    return {
        "token": _token(role),
        "tokenType": "bearer",
        "user": {"id": 1, "name": "Alice", "email": "alice@example.com", "role": role},
    }


class TestAuthSession(unittest.TestCase):

    def test_empty_store_is_anonymous(self) -> None:
        session = AuthSession(MemoryTokenStore())
        self.assertFalse(session.initialize())
        self.assertFalse(session.is_authenticated)
        self.assertFalse(session.is_admin)
        self.assertIsNone(session.role)

    def test_restores_valid_persisted_token(self) -> None:
        token = _token("admin")
        store = MemoryTokenStore({"token": token, "user": {"email": "a@example.com"}})
        session = AuthSession(store)
        self.assertTrue(session.initialize())
        self.assertEqual(session.token, token)
        self.assertEqual(session.role, "admin")
        self.assertTrue(session.is_admin)
        self.assertEqual(session.user, {"email": "a@example.com"})

    def test_expired_persisted_token_discarded(self) -> None:
        store = MemoryTokenStore({"token": _token(expires_in=timedelta(seconds=-1))})
        session = AuthSession(store)
        self.assertFalse(session.initialize())
        self.assertIsNone(store.load())

    def test_malformed_persisted_token_discarded(self) -> None:
        store = MemoryTokenStore({"token": "garbage"})
        session = AuthSession(store)
        self.assertFalse(session.initialize())
        self.assertIsNone(store.load())

    def test_establish_then_teardown(self) -> None:
        store = MemoryTokenStore()
        session = AuthSession(store)
        token = _token("user")
        session.establish(token, {"email": "alice@example.com"})
        self.assertEqual(store.load()["token"], token)
        self.assertEqual(session.role, "user")
        session.teardown()
        self.assertFalse(session.is_authenticated)
        self.assertEqual(session.claims, {})
        self.assertIsNone(store.load())

    def test_require_admin(self) -> None:
        session = AuthSession(MemoryTokenStore())
        session.establish(_token("user"))
        with self.assertRaises(ForbiddenError):
            session.require_admin()
        session.establish(_token("admin"))
        session.require_admin()


class TestFileTokenStore(unittest.TestCase):

    def test_round_trip_and_clear(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "session.json"
            store = FileTokenStore(path)
            self.assertIsNone(store.load())
            store.save({"token": "t", "user": None})
            self.assertEqual(store.load(), {"token": "t", "user": None})
            self.assertEqual(path.stat().st_mode & 0o777, 0o600)
            store.clear()
            self.assertFalse(path.exists())
            store.clear()

    def test_corrupt_file_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "session.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertIsNone(FileTokenStore(path).load())

    def test_file_created_owner_only_before_write(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "session.json"
            with patch("movie_catalog.client.session.os.open", wraps=os.open) as opened:
                FileTokenStore(path).save({"token": "t", "user": None})
            self.assertEqual(opened.call_args.args[2], 0o600)

    def test_existing_file_permissions_tightened(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "session.json"
            path.write_text("{}", encoding="utf-8")
            path.chmod(0o644)
            FileTokenStore(path).save({"token": "t", "user": None})
            self.assertEqual(path.stat().st_mode & 0o777, 0o600)


class _RecordingTransport:
    """Builds an httpx.MockTransport that records requests and answers from a handler."""

    def __init__(self, handler) -> None:
        self.requests: list[httpx.Request] = []

        def _handle(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        self.transport = httpx.MockTransport(_handle)


class TestCatalogClient(unittest.TestCase):

    def _client(self, handler, session: AuthSession | None = None):
        rec = _RecordingTransport(handler)
        session = session or AuthSession(MemoryTokenStore())
        return CatalogClient("http://api.test", session, transport=rec.transport), rec

    def test_login_persists_token_and_attaches_bearer(self) -> None:
        body = _auth_body("admin")

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/auth/login":
                return httpx.Response(200, json=body)
            return httpx.Response(200, json=[])

        client, rec = self._client(handler)
        with client:
            client.login("alice@example.com", "pw-12345678")
            self.assertTrue(client.session.is_admin)
            client.list_movies()
        self.assertNotIn("authorization", rec.requests[0].headers)
        self.assertEqual(json.loads(rec.requests[0].content)["email"], "alice@example.com")
        self.assertEqual(rec.requests[1].headers["authorization"], f"Bearer {body['token']}")

    def test_401_ends_session(self) -> None:
        store = MemoryTokenStore({"token": _token("admin")})
        session = AuthSession(store)
        session.initialize()
        client, _ = self._client(
            lambda r: httpx.Response(401, json={"detail": "Token expired"}), session
        )
        with client, self.assertRaises(UnauthorizedError) as ctx:
            client.delete_movie(3)
        self.assertEqual(ctx.exception.message, "Token expired")
        self.assertFalse(session.is_authenticated)
        self.assertIsNone(store.load())

    def test_error_classes_by_status(self) -> None:
        cases = {
            403: ForbiddenError,
            404: NotFoundError,
            400: BadRequestError,
        }
        for status, exc_type in cases.items():
            client, _ = self._client(lambda r, s=status: httpx.Response(s, json={"detail": "nope"}))
            with client, self.assertRaises(exc_type) as ctx:
                client.get_movie(1)
            self.assertEqual(ctx.exception.status_code, status)

    def test_validation_errors_are_summarised(self) -> None:
        payload = {
            "detail": "Validation failed",
            "errors": [{"loc": ["body", "rating"], "msg": "Input should be less than or equal to 10"}],
        }
        client, _ = self._client(lambda r: httpx.Response(400, json=payload))
        with client, self.assertRaises(BadRequestError) as ctx:
            client.create_movie({"title": "X", "rating": 11})
        self.assertEqual(
            ctx.exception.message,
            "Validation failed: rating: Input should be less than or equal to 10",
        )

    def test_query_parameters(self) -> None:
        client, rec = self._client(lambda r: httpx.Response(200, json=[]))
        with client:
            client.search_movies("dark knight")
            client.sort_movies("releaseDate", "desc")
            client.list_movies(page=2, limit=5)
        self.assertEqual(rec.requests[0].url.params["q"], "dark knight")
        self.assertEqual(rec.requests[1].url.params["by"], "releaseDate")
        self.assertEqual(rec.requests[1].url.params["order"], "desc")
        self.assertEqual(rec.requests[2].url.params["page"], "2")
        self.assertEqual(rec.requests[2].url.params["limit"], "5")


class TestCliGating(unittest.TestCase):
    """Admin commands are refused locally for non-admin sessions (the API checks again)."""

    def _settings(self) -> ClientSettings:
        return ClientSettings(CATALOG_API_URL="http://api.test", CATALOG_SESSION_FILE="unused.json")

    def test_add_refused_without_admin_session(self) -> None:
        factory = MagicMock()
        session = AuthSession(MemoryTokenStore({"token": _token("user")}))
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            code = run(["add", "Heat"], settings=self._settings(), session=session, client_factory=factory)
        self.assertEqual(code, 1)
        self.assertIn("Admin access required", stderr.getvalue())
        factory.assert_not_called()

    def test_add_sent_for_admin_session(self) -> None:
        session = AuthSession(MemoryTokenStore({"token": _token("admin")}))
        rec = _RecordingTransport(
            lambda r: httpx.Response(201, json={"id": 1, "title": "Heat", "rating": 8.3})
        )

        def factory(base_url: str, sess: AuthSession, timeout: float) -> CatalogClient:
            return CatalogClient(base_url, sess, timeout, transport=rec.transport)

        with redirect_stderr(io.StringIO()), patch("sys.stdout", new=io.StringIO()):
            code = run(
                ["add", "Heat", "--rating", "8.3"],
                settings=self._settings(),
                session=session,
                client_factory=factory,
            )
        self.assertEqual(code, 0)
        self.assertEqual(rec.requests[0].method, "POST")
        self.assertEqual(json.loads(rec.requests[0].content), {"title": "Heat", "rating": 8.3})


class TestCliMain(unittest.TestCase):

    def test_main_uses_shared_logging_setup(self) -> None:
        with patch("movie_catalog.client.cli.configure_logging") as configure, patch(
            "movie_catalog.client.cli.run", return_value=0
        ) as run_cli:
            self.assertEqual(main(), 0)
        configure.assert_called_once_with("WARNING")
        run_cli.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
