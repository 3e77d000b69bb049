"""Pydantic models for URL recipe parsing."""

import enum
from typing import List, Optional

from pydantic import BaseModel, Field

from recipe_keeper.app.services.url_parsing.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_SOURCE,
    DEFAULT_TITLE,
    PLACEHOLDER_IMAGE,
)


class FetchStatus(str, enum.Enum):
    OK = "ok"
    PARTIAL = "partial"
    ERROR = "error"


class ParseStrategy(str, enum.Enum):
    GENERIC_HTML = "generic_html"
    SHORT_VIDEO = "short_video"


class RawPayload(BaseModel):
    """Fetched content for one URL, discarded after parsing."""

    source_url: str
    markup: str = ""
    status: FetchStatus = FetchStatus.OK
    content_type: Optional[str] = None


class FetchResult(BaseModel):
    """Result of a page fetch; failures are values, never exceptions."""

    success: bool
    data: Optional[RawPayload] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class IngredientSection(BaseModel):
    title: str
    items: List[str] = Field(default_factory=list)


class VideoEmbed(BaseModel):
    platform: str
    url: str


class ShortVideoContent(BaseModel):
    title: str
    description: str = ""
    embed_url: Optional[str] = None
    video_id: Optional[str] = None
    author: Optional[str] = None


class ParsedRecipe(BaseModel):
    """A normalized recipe extracted from a page."""

    title: str = DEFAULT_TITLE
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    image: str = PLACEHOLDER_IMAGE
    category: str = DEFAULT_CATEGORY
    prep_time: Optional[str] = None
    source: str = DEFAULT_SOURCE
    source_url: str = ""
    youtube_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    author: Optional[str] = None
    credits: Optional[str] = None
    site_categories: List[str] = Field(default_factory=list)
