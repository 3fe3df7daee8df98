"""Pydantic schemas for scraped items: create/update requests, item view and paged listing."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CreateScrapedItemRequest(BaseModel):
    """Payload for POST /scraped-items. Checked by the create rule set, not by pydantic."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(default="", description="Page or article title (max 256).")
    url: str = Field(default="", description="Absolute http(s) URL (max 2048).")
    source: str | None = Field(default=None, description="Origin site or feed (max 128).")
    summary: str | None = Field(default=None, description="Short abstract (max 1024).")
    content: str | None = Field(default=None, description="Full extracted text.")
    collected_at: datetime | None = Field(
        default=None,
        description="When the item was collected; defaults to now. Must not be in the future.",
    )
    metadata: dict[str, str] | None = Field(
        default=None,
        description="Arbitrary string key/value pairs. Empty is stored as no metadata.",
    )


class UpdateScrapedItemRequest(BaseModel):
    """
    Payload for PUT /scraped-items/{id}: a partial update.

    Only non-null fields overwrite the stored item. An empty metadata object
    clears stored metadata; a null or missing one leaves it unchanged.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    url: str | None = None
    source: str | None = None
    summary: str | None = None
    content: str | None = None
    collected_at: datetime | None = None
    metadata: dict[str, str] | None = None


class ScrapedItemDto(BaseModel):
    """Scraped item as returned over the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    url: str
    source: str | None = None
    summary: str | None = None
    content: str | None = None
    collected_at: datetime
    metadata: dict[str, str] | None = None


class ScrapedItemPage(BaseModel):
    """One page of a filtered listing; total counts every matching row."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=100)
    items: list[ScrapedItemDto] = Field(default_factory=list)
