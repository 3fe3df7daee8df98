"""
Create a user with a chosen role (registration always assigns 'User', so this is
how the first admin is made). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password Admin
"""
import argparse
import logging
import sys

from app.core import roles
from app.core.config import get_settings
from app.core.database import SessionLocal
from app.schemas.auth import RegisterRequest
from app.services import identity
from app.services.validation import REGISTER_RULES, collect_errors

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Crawler API user.")
    parser.add_argument("username", help="User name (3-64 chars: letters, digits, _ and -)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("role", nargs="?", default=roles.USER, choices=list(roles.ALL_ROLES))
    args = parser.parse_args(argv)

    request = RegisterRequest(
        email=args.email.strip(),
        user_name=args.username.strip(),
        password=args.password,
    )
    errors = collect_errors(request, REGISTER_RULES)
    if errors:
        for field, messages in errors.items():
            for message in messages:
                print(f"{field}: {message}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        if identity.find_by_email(db, request.email) or identity.find_by_user_name(
            db, request.user_name
        ):
            print(
                f"User '{request.user_name}' or email '{request.email}' already exists.",
                file=sys.stderr,
            )
            return 1
        user, policy_errors = identity.create_user(
            db,
            get_settings(),
            email=request.email,
            user_name=request.user_name,
            password=request.password,
            display_name=request.user_name,
        )
        if user is None:
            for messages in policy_errors.values():
                for message in messages:
                    print(message, file=sys.stderr)
            db.rollback()
            return 1
        identity.ensure_roles(db, roles.ALL_ROLES)
        identity.add_to_role(db, user, args.role)
        db.commit()
        logger.info("Created user '%s' with role '%s'.", user.user_name, args.role)
        print(f"Created user '{user.user_name}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
