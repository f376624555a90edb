"""Unit tests for movie_catalog.core.security: bcrypt hashing and JWT issue/verify."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from movie_catalog.core import security
from movie_catalog.core.config import settings
from movie_catalog.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

security.BCRYPT_ROUNDS = 4


class TestPasswordHashing(unittest.TestCase):
    """Passwords are stored only as salted bcrypt hashes."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("s3cret-password")
        self.assertNotIn("s3cret-password", hashed)
        self.assertTrue(hashed.startswith("$2"))
        self.assertTrue(verify_password("s3cret-password", hashed))

    def test_wrong_password_rejected(self) -> None:
        hashed = hash_password("s3cret-password")
        self.assertFalse(verify_password("other-password", hashed))

    def test_same_password_gets_different_salts(self) -> None:
        self.assertNotEqual(hash_password("same-password"), hash_password("same-password"))

    def test_malformed_hash_is_false_not_error(self) -> None:
        self.assertFalse(verify_password("whatever", "not-a-bcrypt-hash"))


class TestTokenClaims(unittest.TestCase):
    """Issued tokens carry sub/id, role, iat and exp."""

    def test_claims_round_trip(self) -> None:
        token = create_access_token(sub=42, role="admin")
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "42")
        self.assertEqual(payload["id"], 42)
        self.assertEqual(payload["role"], "admin")
        self.assertEqual(
            payload["exp"] - payload["iat"],
            settings.JWT_EXPIRE_MINUTES * 60,
        )

    def test_wrong_signature_rejected(self) -> None:
        now = datetime.now(UTC)
        forged = jwt.encode(
            {"sub": "1", "id": 1, "role": "admin", "iat": now, "exp": now + timedelta(minutes=5)},
            "not-the-server-secret",
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(forged)

    def test_missing_role_claim_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "1", "iat": now, "exp": now + timedelta(minutes=5)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            decode_access_token(token)

    def test_garbage_rejected(self) -> None:
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token("not.a.token")


class TestTokenExpiry(unittest.TestCase):
    """A token issued at T with lifetime D verifies in [T, T+D) and not at or after T+D."""

    LIFETIME = timedelta(minutes=10)

    def test_valid_right_after_issue(self) -> None:
        token = create_access_token(1, "user", expires_delta=self.LIFETIME)
        self.assertEqual(decode_access_token(token)["role"], "user")

    def test_valid_just_before_expiry(self) -> None:
        issued_at = datetime.now(UTC) - self.LIFETIME + timedelta(seconds=30)
        token = create_access_token(1, "user", issued_at=issued_at, expires_delta=self.LIFETIME)
        self.assertEqual(decode_access_token(token)["sub"], "1")

    def test_rejected_at_expiry(self) -> None:
        issued_at = datetime.now(UTC) - self.LIFETIME
        token = create_access_token(1, "user", issued_at=issued_at, expires_delta=self.LIFETIME)
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_rejected_after_expiry(self) -> None:
        issued_at = datetime.now(UTC) - self.LIFETIME - timedelta(hours=1)
        token = create_access_token(1, "user", issued_at=issued_at, expires_delta=self.LIFETIME)
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_fractional_issue_time_truncated_to_second(self) -> None:
        issued_at = datetime(2026, 10, 19, 12, 0, 0, 750000, tzinfo=UTC)
        token = create_access_token(1, "user", issued_at=issued_at, expires_delta=self.LIFETIME)
        claims = jwt.decode(token, options={"verify_signature": False})
        whole = int(issued_at.replace(microsecond=0).timestamp())
        self.assertEqual(claims["iat"], whole)
        self.assertEqual(claims["exp"], whole + int(self.LIFETIME.total_seconds()))


if __name__ == "__main__":
    unittest.main()
