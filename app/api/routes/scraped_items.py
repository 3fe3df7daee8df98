"""Scraped items endpoints: filtered listing, fetch, create, partial update, delete."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.routes.auth import get_current_user
from app.core.config import get_settings
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.scraped_item import (
    CreateScrapedItemRequest,
    ScrapedItemDto,
    ScrapedItemPage,
    UpdateScrapedItemRequest,
)
from app.services import scraped_items

router = APIRouter()


@router.get("", response_model=ScrapedItemPage)
def list_scraped_items(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    search: str | None = None,
    source: str | None = None,
    collected_from: Annotated[datetime | None, Query(alias="collectedFrom")] = None,
    collected_to: Annotated[datetime | None, Query(alias="collectedTo")] = None,
    page: int = 1,
    page_size: Annotated[int, Query(alias="pageSize")] = scraped_items.DEFAULT_PAGE_SIZE,
) -> ScrapedItemPage:
    """
    Return one page of items, newest first.

    - **search**: case-insensitive substring of title, summary or content.
    - **source**: exact source match.
    - **collectedFrom** / **collectedTo**: inclusive bounds on collection time.
    - **page** (< 1 becomes 1) and **pageSize** (< 1 becomes 20, capped at 100).

    `total` counts every item matching the filters, not just this page.
    """
    page, page_size = scraped_items.normalize_paging(page, page_size)
    total, items = scraped_items.search_scraped_items(
        db,
        search=search,
        source=source,
        collected_from=collected_from,
        collected_to=collected_to,
        page=page,
        page_size=page_size,
    )
    return ScrapedItemPage(
        total=total,
        page=page,
        page_size=page_size,
        items=[scraped_items.to_dto(item) for item in items],
    )


@router.get("/{item_id}", response_model=ScrapedItemDto)
def get_scraped_item(
    item_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ScrapedItemDto:
    """Return a single item, 404 if it does not exist."""
    return scraped_items.to_dto(scraped_items.get_scraped_item(db, item_id))


@router.post("", response_model=ScrapedItemDto, status_code=status.HTTP_201_CREATED)
def create_scraped_item(
    body: CreateScrapedItemRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ScrapedItemDto:
    """
    Store a collected item. Title and an absolute http(s) URL are required;
    collectedAt defaults to now and may not be in the future.
    """
    item = scraped_items.create_scraped_item(db, body)
    response.headers["Location"] = f"{get_settings().API_PREFIX}/scraped-items/{item.id}"
    return scraped_items.to_dto(item)


@router.put("/{item_id}", response_model=ScrapedItemDto)
def update_scraped_item(
    item_id: int,
    body: UpdateScrapedItemRequest,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ScrapedItemDto:
    """
    Partially update an item: only fields present and non-null are written.
    Send `"metadata": {}` to remove stored metadata.
    """
    item = scraped_items.update_scraped_item(db, item_id, body)
    return scraped_items.to_dto(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_scraped_item(
    item_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    """Delete an item permanently, 404 if it does not exist."""
    scraped_items.delete_scraped_item(db, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
