"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.scraped_item import ScrapedItem
from app.models.user import Role, User, user_roles

__all__ = ["Base", "Role", "ScrapedItem", "User", "user_roles"]
