"""Registration, login and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import roles
from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import (
    CLAIM_DISPLAY_NAME,
    CLAIM_EMAIL,
    CLAIM_ROLE,
    CLAIM_UNIQUE_NAME,
    create_access_token,
    decode_access_token,
)
from app.models import User
from app.schemas.auth import (
    AuthenticatedUser,
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
)
from app.services import identity
from app.services.validation import (
    LOGIN_RULES,
    REGISTER_RULES,
    RequestValidationFailed,
    validate,
)

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS = "Invalid account or password."


def _auth_response(user: User) -> AuthResponse:
    user_roles = identity.get_roles(user)
    token, expires_at = create_access_token(
        user_id=user.id,
        user_name=user.user_name,
        email=user.email,
        display_name=user.display_name,
        roles=user_roles,
    )
    return AuthResponse(
        token=token,
        expires_at=expires_at,
        user=AuthenticatedUser(
            id=user.id,
            user_name=user.user_name,
            email=user.email,
            display_name=user.display_name,
            roles=user_roles,
        ),
    )


@router.post("/register", response_model=AuthResponse)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Create an account with the 'User' role and return a token for it.

    409 if the email or user name is taken, 400 with field errors if the
    request or the password policy rejects it.
    """
    body = body.model_copy(
        update={"email": body.email.strip(), "user_name": body.user_name.strip()}
    )
    validate(body, REGISTER_RULES)
    email = body.email
    user_name = body.user_name

    if identity.find_by_email(db, email) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        )
    if identity.find_by_user_name(db, user_name) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User name is already taken.",
        )

    display_name = (
        body.display_name.strip()
        if body.display_name and body.display_name.strip()
        else user_name
    )
    user, errors = identity.create_user(
        db,
        get_settings(),
        email=email,
        user_name=user_name,
        password=body.password,
        display_name=display_name,
    )
    if user is None:
        db.rollback()
        raise RequestValidationFailed(errors)

    identity.add_to_role(db, user, roles.USER)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email or name.
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email or user name is already registered.",
        )
    db.refresh(user)
    logger.info("User registered: id=%s user_name=%s", user.id, user.user_name)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email or user name plus password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    validate(body, LOGIN_RULES)
    identifier = body.email_or_user_name.strip()

    user = identity.find_by_email(db, identifier) or identity.find_by_user_name(
        db, identifier
    )
    if user is None or not identity.check_password(user, body.password):
        logger.warning("Failed login for identifier=%r", identifier)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_CREDENTIALS,
        )
    return _auth_response(user)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the user it describes. Raises 401 if
    missing or invalid. Tokens are self-contained; the database is not consulted.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token_roles = payload.get(CLAIM_ROLE) or []
    if isinstance(token_roles, str):
        token_roles = [token_roles]
    return CurrentUser(
        id=str(sub),
        user_name=payload.get(CLAIM_UNIQUE_NAME) or str(sub),
        email=payload.get(CLAIM_EMAIL),
        display_name=payload.get(CLAIM_DISPLAY_NAME),
        roles=list(token_roles),
    )


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'Admin'. Raises 403 otherwise."""
    if roles.ADMIN not in current_user.roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
