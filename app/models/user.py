"""ORM models for application users and roles (auth and RBAC)."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, func
from sqlalchemy.orm import relationship

from app.models.base import Base

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named role ('Admin' or 'User')."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True, index=True)


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    normalized_* columns hold upper-cased copies used for case-insensitive lookup
    and uniqueness.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_name = Column(String(256), nullable=False)
    normalized_user_name = Column(String(256), nullable=False, unique=True, index=True)
    email = Column(String(256), nullable=False)
    normalized_email = Column(String(256), nullable=False, unique=True, index=True)
    display_name = Column(String(256), nullable=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    roles = relationship("Role", secondary=user_roles, lazy="selectin")
