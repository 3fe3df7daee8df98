"""Shared fixtures: in-memory database and an API test case with auth helpers."""

import unittest
from collections.abc import Generator
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.security import create_access_token
from app.main import app
from app.models import Base, ScrapedItem


def make_session_factory() -> sessionmaker[Session]:
    """Fresh in-memory SQLite database with all tables created."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def add_item(
    session: Session,
    title: str = "Item",
    *,
    hours_ago: float = 1,
    **kwargs: object,
) -> ScrapedItem:
    """Insert a scraped item collected `hours_ago` hours before now."""
    item = ScrapedItem(
        title=title,
        url=kwargs.pop("url", "https://example.com/item"),
        collected_at=datetime.now(UTC) - timedelta(hours=hours_ago),
        **kwargs,
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


class ApiTestCase(unittest.TestCase):
    """Runs the app against a per-test in-memory database."""

    def setUp(self) -> None:
        self.session_factory = make_session_factory()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.pop(get_db, None)

    def auth_headers(self, roles: tuple[str, ...] = ("User",)) -> dict[str, str]:
        token, _ = create_access_token(
            user_id="test-user-id",
            user_name="tester",
            email="tester@example.com",
            display_name="Tester",
            roles=roles,
        )
        return {"Authorization": f"Bearer {token}"}
