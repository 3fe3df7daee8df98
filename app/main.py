"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from app.api.routes import router as api_router
from app.core import roles
from app.core.config import settings
from app.core.database import SessionLocal
from app.schemas.errors import ProblemResponse, ValidationProblem
from app.services.identity import ensure_roles
from app.services.scraped_items import ScrapedItemNotFound
from app.services.validation import RequestValidationFailed

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Make sure the built-in roles exist before serving requests."""
    db = SessionLocal()
    try:
        ensure_roles(db, roles.ALL_ROLES)
        db.commit()
    finally:
        db.close()
    yield


app = FastAPI(
    title="Crawler API",
    version="0.1.0",
    description="Management API for items collected by crawlers.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

_origins = settings.resolved_cors_allowed_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins or ["*"],
    allow_credentials=bool(_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


def _property_name(loc: tuple[int | str, ...]) -> str:
    """('body', 'collectedAt') -> 'CollectedAt'; falls back to the request part ('body')."""
    names = [part for part in loc if isinstance(part, str)]
    name = names[-1] if names else "request"
    return name[:1].upper() + name[1:]


@app.exception_handler(RequestValidationFailed)
async def handle_validation_failed(_request: Request, exc: RequestValidationFailed) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationProblem(errors=exc.errors).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def handle_request_shape_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies or parameters get the same 400 shape as rule-set failures."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        errors.setdefault(_property_name(tuple(error.get("loc", ()))), []).append(
            error.get("msg", "Invalid value.")
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationProblem(errors=errors).model_dump(),
    )


@app.exception_handler(ScrapedItemNotFound)
async def handle_not_found(_request: Request, _exc: ScrapedItemNotFound) -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ProblemResponse(title="An unexpected error occurred.", status=500).model_dump(),
    )
