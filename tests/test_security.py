"""Unit tests for app.core.security: password hashing, token issuance and verification."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import get_settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def _token(**kwargs: object) -> tuple[str, datetime]:
    defaults: dict[str, object] = {
        "user_id": "user-1",
        "user_name": "alice",
        "email": "a@x.com",
        "display_name": "Alice",
        "roles": ["User"],
    }
    defaults.update(kwargs)
    return create_access_token(**defaults)


class TestPasswordHashing(unittest.TestCase):
    def test_hash_verifies_against_original_password(self) -> None:
        hashed = hash_password("secret")
        self.assertNotEqual(hashed, "secret")
        self.assertTrue(verify_password("secret", hashed))

    def test_wrong_password_does_not_verify(self) -> None:
        hashed = hash_password("secret")
        self.assertFalse(verify_password("Secret", hashed))

    def test_malformed_hash_does_not_verify(self) -> None:
        self.assertFalse(verify_password("secret", "not-a-bcrypt-hash"))


class TestCreateAccessToken(unittest.TestCase):
    def test_claims_describe_the_user(self) -> None:
        token, _ = _token(roles=["Admin", "User"])
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "user-1")
        self.assertEqual(payload["unique_name"], "alice")
        self.assertEqual(payload["email"], "a@x.com")
        self.assertEqual(payload["display_name"], "Alice")
        self.assertEqual(payload["role"], ["Admin", "User"])
        settings = get_settings()
        self.assertEqual(payload["iss"], settings.JWT_ISSUER)
        self.assertEqual(payload["aud"], settings.JWT_AUDIENCE)

    def test_expiry_is_configured_minutes_after_issue(self) -> None:
        token, expires_at = _token()
        payload = decode_access_token(token)
        lifetime = payload["exp"] - payload["iat"]
        self.assertEqual(lifetime, get_settings().JWT_EXPIRE_MINUTES * 60)
        self.assertEqual(int(expires_at.timestamp()), payload["exp"])
        self.assertGreater(expires_at, datetime.now(UTC))

    def test_each_token_gets_a_fresh_jti(self) -> None:
        first, _ = _token()
        second, _ = _token()
        self.assertNotEqual(
            decode_access_token(first)["jti"], decode_access_token(second)["jti"]
        )

    def test_unique_name_falls_back_to_email(self) -> None:
        token, _ = _token(user_name=None)
        self.assertEqual(decode_access_token(token)["unique_name"], "a@x.com")

    def test_blank_display_name_is_omitted(self) -> None:
        token, _ = _token(display_name="  ")
        self.assertNotIn("display_name", decode_access_token(token))


class TestDecodeAccessToken(unittest.TestCase):
    def _encode(self, **overrides: object) -> str:
        settings = get_settings()
        now = datetime.now(UTC)
        payload: dict[str, object] = {
            "sub": "user-1",
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
            "iat": now,
            "exp": now + timedelta(minutes=5),
        }
        payload.update(overrides)
        return jwt.encode(
            payload, settings.JWT_SECRET.get_secret_value(), algorithm="HS256"
        )

    def test_accepts_well_formed_token(self) -> None:
        self.assertEqual(decode_access_token(self._encode())["sub"], "user-1")

    def test_rejects_tampered_signature(self) -> None:
        token, _ = _token()
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(tampered)

    def test_rejects_token_signed_with_other_secret(self) -> None:
        token = jwt.encode(
            {"sub": "user-1", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            "another-secret-of-enough-length",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(token)

    def test_rejects_expired_token_beyond_clock_skew(self) -> None:
        expired = datetime.now(UTC) - timedelta(minutes=10)
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(self._encode(exp=expired))

    def test_tolerates_expiry_within_clock_skew(self) -> None:
        just_expired = datetime.now(UTC) - timedelta(seconds=10)
        self.assertEqual(
            decode_access_token(self._encode(exp=just_expired))["sub"], "user-1"
        )

    def test_rejects_wrong_audience(self) -> None:
        with self.assertRaises(jwt.InvalidAudienceError):
            decode_access_token(self._encode(aud="someone-else"))

    def test_rejects_wrong_issuer(self) -> None:
        with self.assertRaises(jwt.InvalidIssuerError):
            decode_access_token(self._encode(iss="someone-else"))


if __name__ == "__main__":
    unittest.main()
