"""
User management: lookup, creation with password policy, password checks and roles.

Routes treat this module as an external identity service; nothing here knows
about HTTP.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.models import Role, User

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def _normalize(value: str) -> str:
    return value.strip().upper()


def find_by_email(session: Session, email: str) -> User | None:
    """Return the user with this email (case-insensitive), or None."""
    return (
        session.query(User)
        .filter(User.normalized_email == _normalize(email))
        .first()
    )


def find_by_user_name(session: Session, user_name: str) -> User | None:
    """Return the user with this user name (case-insensitive), or None."""
    return (
        session.query(User)
        .filter(User.normalized_user_name == _normalize(user_name))
        .first()
    )


def check_password_policy(password: str, settings: "Settings") -> dict[str, list[str]]:
    """Return policy violations keyed by error code; empty when the password is acceptable."""
    errors: dict[str, list[str]] = {}
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        errors["PasswordTooShort"] = [
            f"Passwords must be at least {settings.PASSWORD_MIN_LENGTH} characters."
        ]
    return errors


def create_user(
    session: Session,
    settings: "Settings",
    *,
    email: str,
    user_name: str,
    password: str,
    display_name: str | None = None,
) -> tuple[User | None, dict[str, list[str]]]:
    """
    Create and flush a user with a hashed password.

    Returns (user, {}) on success or (None, errors) when the password policy
    rejects the password. Uniqueness is enforced by the caller's lookups and,
    ultimately, by the unique indexes (IntegrityError on commit).
    """
    errors = check_password_policy(password, settings)
    if errors:
        return None, errors
    user = User(
        email=email,
        normalized_email=_normalize(email),
        user_name=user_name,
        normalized_user_name=_normalize(user_name),
        display_name=display_name,
        password_hash=hash_password(password),
    )
    session.add(user)
    session.flush()
    return user, {}


def check_password(user: User, password: str) -> bool:
    """True if password matches the user's stored hash."""
    return verify_password(password, user.password_hash)


def get_roles(user: User) -> list[str]:
    """Role names assigned to the user, sorted."""
    return sorted(role.name for role in user.roles)


def ensure_roles(session: Session, names: Iterable[str]) -> list[str]:
    """Create any missing roles; return the names that were created. Does not commit."""
    wanted = list(dict.fromkeys(names))
    existing = {
        name for (name,) in session.query(Role.name).filter(Role.name.in_(wanted)).all()
    }
    created: list[str] = []
    for name in wanted:
        if name not in existing:
            session.add(Role(name=name))
            created.append(name)
    if created:
        session.flush()
        logger.info("Created roles: %s", ", ".join(created))
    return created


def add_to_role(session: Session, user: User, role_name: str) -> None:
    """Assign role_name to user, creating the role if it does not exist yet."""
    ensure_roles(session, [role_name])
    role = session.query(Role).filter(Role.name == role_name).one()
    if role not in user.roles:
        user.roles.append(role)
    session.flush()
