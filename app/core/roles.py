"""Role names known to the application."""

ADMIN = "Admin"
USER = "User"

ALL_ROLES: tuple[str, ...] = (ADMIN, USER)
