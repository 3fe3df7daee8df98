"""Unit tests for app.core.config: required JWT secret and value checks."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from app.core.config import Settings

VALID_SECRET = "0123456789abcdef"


class TestJwtSecret(unittest.TestCase):
    def test_missing_secret_fails(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValidationError):
                Settings(_env_file=None)

    def test_short_secret_fails(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET="too-short")

    def test_whitespace_padding_does_not_count(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET="   short-secret   ")

    def test_sixteen_characters_is_enough(self) -> None:
        settings = Settings(_env_file=None, JWT_SECRET=VALID_SECRET)
        self.assertEqual(settings.JWT_SECRET.get_secret_value(), VALID_SECRET)


class TestDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None, JWT_SECRET=VALID_SECRET)
        self.assertEqual(settings.API_PREFIX, "/api")
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 120)
        self.assertEqual(settings.PASSWORD_MIN_LENGTH, 6)
        self.assertEqual(settings.resolved_cors_allowed_origins, [])


class TestValueChecks(unittest.TestCase):
    def test_rejects_unsupported_database_scheme(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(
                _env_file=None,
                JWT_SECRET=VALID_SECRET,
                DATABASE_URL="mysql://root@localhost/crawler",
            )

    def test_accepts_sqlite_database(self) -> None:
        settings = Settings(
            _env_file=None, JWT_SECRET=VALID_SECRET, DATABASE_URL="sqlite:///./crawler.db"
        )
        self.assertEqual(settings.DATABASE_URL, "sqlite:///./crawler.db")

    def test_rejects_asymmetric_algorithm(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET=VALID_SECRET, JWT_ALGORITHM="RS256")

    def test_rejects_zero_expiry(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET=VALID_SECRET, JWT_EXPIRE_MINUTES=0)

    def test_cors_origins_are_split_and_trimmed(self) -> None:
        settings = Settings(
            _env_file=None,
            JWT_SECRET=VALID_SECRET,
            CORS_ALLOWED_ORIGINS="http://localhost:5173, https://admin.example.com ,",
        )
        self.assertEqual(
            settings.resolved_cors_allowed_origins,
            ["http://localhost:5173", "https://admin.example.com"],
        )


if __name__ == "__main__":
    unittest.main()
