"""Scraped item storage: filtered paged listing, metadata codec, and create/update/delete."""

import json
import logging
from datetime import UTC, datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session

from app.models import ScrapedItem
from app.schemas.scraped_item import (
    CreateScrapedItemRequest,
    ScrapedItemDto,
    UpdateScrapedItemRequest,
)
from app.services.validation import (
    CREATE_SCRAPED_ITEM_RULES,
    UPDATE_SCRAPED_ITEM_RULES,
    as_utc,
    validate,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Item ids are stored as signed 64-bit integers.
MAX_ITEM_ID = 2**63 - 1


class ScrapedItemNotFound(Exception):
    """Raised when no scraped item exists with the requested id."""

    def __init__(self, item_id: int) -> None:
        self.item_id = item_id
        super().__init__(f"Scraped item {item_id} not found")


def normalize_paging(page: int, page_size: int) -> tuple[int, int]:
    """Coerce page to >= 1 and page_size to 20 when <= 0, else into [1, 100]."""
    page = 1 if page <= 0 else page
    page_size = DEFAULT_PAGE_SIZE if page_size <= 0 else min(max(page_size, 1), MAX_PAGE_SIZE)
    return page, page_size


# --- metadata codec ---


def serialize_metadata(metadata: dict[str, str] | None) -> str | None:
    """JSON text for a non-empty mapping; None for a missing or empty one."""
    if not metadata:
        return None
    return json.dumps(metadata, ensure_ascii=False)


def deserialize_metadata(raw: str | None) -> dict[str, str] | None:
    """Parse stored metadata. Anything that is not a JSON object of strings reads as None."""
    if raw is None or not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Ignoring unparseable scraped item metadata: %.80r", raw)
        return None
    if not isinstance(data, dict) or not all(
        isinstance(value, str) for value in data.values()
    ):
        logger.debug("Ignoring scraped item metadata that is not a string map")
        return None
    return data


def to_dto(item: ScrapedItem) -> ScrapedItemDto:
    """Map an ORM row to its API representation."""
    return ScrapedItemDto(
        id=item.id,
        title=item.title,
        url=item.url,
        source=item.source,
        summary=item.summary,
        content=item.content,
        collected_at=as_utc(item.collected_at),
        metadata=deserialize_metadata(item.metadata_json),
    )


# --- queries ---


def _apply_filters(
    query: Query,
    search: str | None,
    source: str | None,
    collected_from: datetime | None,
    collected_to: datetime | None,
) -> Query:
    if search and search.strip():
        term = search.strip()
        query = query.filter(
            or_(
                ScrapedItem.title.icontains(term, autoescape=True),
                and_(
                    ScrapedItem.summary.isnot(None),
                    ScrapedItem.summary.icontains(term, autoescape=True),
                ),
                and_(
                    ScrapedItem.content.isnot(None),
                    ScrapedItem.content.icontains(term, autoescape=True),
                ),
            )
        )
    if source and source.strip():
        query = query.filter(ScrapedItem.source == source)
    if collected_from is not None:
        query = query.filter(ScrapedItem.collected_at >= as_utc(collected_from))
    if collected_to is not None:
        query = query.filter(ScrapedItem.collected_at <= as_utc(collected_to))
    return query


def search_scraped_items(
    session: Session,
    *,
    search: str | None = None,
    source: str | None = None,
    collected_from: datetime | None = None,
    collected_to: datetime | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> tuple[int, list[ScrapedItem]]:
    """
    Return (total, items) for one page of items matching the filters.

    search is a case-insensitive substring over title, summary or content;
    source is an exact match; the date bounds are inclusive. total counts the
    filtered rows before paging. Items are newest first. page and page_size
    must already be normalized (see normalize_paging).
    """
    query = _apply_filters(
        session.query(ScrapedItem), search, source, collected_from, collected_to
    )
    total = query.count()
    offset = (page - 1) * page_size
    if offset >= total:
        return total, []
    items = (
        query.order_by(ScrapedItem.collected_at.desc())
        .offset(offset)
        .limit(page_size)
        .all()
    )
    return total, items


def get_scraped_item(session: Session, item_id: int) -> ScrapedItem:
    """Return the item with this id or raise ScrapedItemNotFound."""
    if not -MAX_ITEM_ID - 1 <= item_id <= MAX_ITEM_ID:
        raise ScrapedItemNotFound(item_id)
    item = session.get(ScrapedItem, item_id)
    if item is None:
        raise ScrapedItemNotFound(item_id)
    return item


# --- mutations ---


def create_scraped_item(session: Session, body: CreateScrapedItemRequest) -> ScrapedItem:
    """Validate and persist a new item; collected_at defaults to now (UTC)."""
    validate(body, CREATE_SCRAPED_ITEM_RULES)
    item = ScrapedItem(
        title=body.title,
        url=body.url,
        source=body.source,
        summary=body.summary,
        content=body.content,
        collected_at=as_utc(body.collected_at) if body.collected_at else datetime.now(UTC),
        metadata_json=serialize_metadata(body.metadata),
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    logger.info("Scraped item created: id=%s source=%s", item.id, item.source)
    return item


def update_scraped_item(
    session: Session, item_id: int, body: UpdateScrapedItemRequest
) -> ScrapedItem:
    """
    Apply a partial update. None means "not supplied" for every field; for
    metadata an empty mapping clears the stored value.
    """
    item = get_scraped_item(session, item_id)
    validate(body, UPDATE_SCRAPED_ITEM_RULES)

    if body.title is not None:
        item.title = body.title
    if body.url is not None:
        item.url = body.url
    if body.source is not None:
        item.source = body.source
    if body.summary is not None:
        item.summary = body.summary
    if body.content is not None:
        item.content = body.content
    if body.collected_at is not None:
        item.collected_at = as_utc(body.collected_at)
    if body.metadata is not None:
        item.metadata_json = serialize_metadata(body.metadata)

    session.commit()
    session.refresh(item)
    logger.info("Scraped item updated: id=%s", item.id)
    return item


def delete_scraped_item(session: Session, item_id: int) -> None:
    """Physically remove the item or raise ScrapedItemNotFound."""
    item = get_scraped_item(session, item_id)
    session.delete(item)
    session.commit()
    logger.info("Scraped item deleted: id=%s", item_id)
