"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RegisterRequest(BaseModel):
    """
    New account details.

    Fields default to empty so that missing values are reported by the
    register rule set together with every other violation.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str = Field(default="", description="Email address")
    password: str = Field(default="", description="Password")
    user_name: str = Field(default="", description="Login name (letters, digits, _ and -)")
    display_name: str | None = Field(default=None, description="Name shown in the UI")


class LoginRequest(BaseModel):
    """Credentials for login; the identifier may be an email or a user name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email_or_user_name: str = Field(default="", description="Email or user name")
    password: str = Field(default="", description="Password")


class AuthenticatedUser(BaseModel):
    """Public view of the signed-in account."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    user_name: str | None = None
    email: str | None = None
    display_name: str | None = None
    roles: list[str] = Field(default_factory=list)


class AuthResponse(BaseModel):
    """Token plus the account it was issued for."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: str = Field(..., description="JWT access token; send as 'Authorization: Bearer <token>'")
    expires_at: datetime = Field(..., description="Absolute expiry of the token (UTC)")
    user: AuthenticatedUser


class CurrentUser(BaseModel):
    """Authenticated user rebuilt from token claims for dependency injection."""

    id: str
    user_name: str
    email: str | None = None
    display_name: str | None = None
    roles: list[str] = Field(default_factory=list)
