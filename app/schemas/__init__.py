"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthenticatedUser,
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
)
from app.schemas.errors import ProblemResponse, ValidationProblem
from app.schemas.health import HealthResponse
from app.schemas.scraped_item import (
    CreateScrapedItemRequest,
    ScrapedItemDto,
    ScrapedItemPage,
    UpdateScrapedItemRequest,
)

__all__ = [
    "AuthResponse",
    "AuthenticatedUser",
    "CreateScrapedItemRequest",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "ProblemResponse",
    "RegisterRequest",
    "ScrapedItemDto",
    "ScrapedItemPage",
    "UpdateScrapedItemRequest",
    "ValidationProblem",
]
