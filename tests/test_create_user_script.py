"""Tests for the create_user CLI (bootstrap accounts with a chosen role)."""

import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from unittest.mock import patch

from app.models import User
from app.scripts import create_user
from app.services import identity
from tests.support import make_session_factory


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        patcher = patch.object(create_user, "SessionLocal", self.session_factory)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = StringIO(), StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = create_user.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self._run("root", "root@example.com", "password1", "Admin")
        self.assertEqual(code, 0)
        self.assertIn("Admin", out)
        with self.session_factory() as db:
            user = db.query(User).one()
            self.assertEqual(identity.get_roles(user), ["Admin"])
            self.assertTrue(identity.check_password(user, "password1"))

    def test_role_defaults_to_user(self) -> None:
        code, _, _ = self._run("carol", "carol@example.com", "password1")
        self.assertEqual(code, 0)
        with self.session_factory() as db:
            self.assertEqual(identity.get_roles(db.query(User).one()), ["User"])

    def test_duplicate_is_rejected(self) -> None:
        self._run("root", "root@example.com", "password1", "Admin")
        code, _, err = self._run("root", "other@example.com", "password1")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_invalid_input_is_rejected(self) -> None:
        code, _, err = self._run("x", "not-an-email", "123")
        self.assertEqual(code, 1)
        self.assertIn("Email", err)
        self.assertIn("Password", err)
        with self.session_factory() as db:
            self.assertEqual(db.query(User).count(), 0)


if __name__ == "__main__":
    unittest.main()
