"""API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from app.api.routes import auth, health, scraped_items

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(scraped_items.router, prefix="/scraped-items", tags=["scraped-items"])
