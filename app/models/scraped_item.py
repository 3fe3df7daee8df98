"""ORM model for items collected by crawlers."""

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, func

from app.models.base import Base


class ScrapedItem(Base):
    """
    One collected page or article.

    metadata_json holds a JSON object of string values (or NULL); it is
    serialized and parsed at the service layer, not by the database.
    """

    __tablename__ = "scraped_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(256), nullable=False, index=True)
    url = Column(String(2048), nullable=False, index=True)
    source = Column(String(128), nullable=True, index=True)
    summary = Column(String(1024), nullable=True)
    content = Column(Text, nullable=True)
    collected_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    metadata_json = Column(Text, nullable=True)


# Listing filters by time range and source, and always sorts newest first.
Index("ix_scraped_items_collected_at_source", ScrapedItem.collected_at, ScrapedItem.source)
Index("ix_scraped_items_collected_at_desc", ScrapedItem.collected_at.desc())
