"""Known recipe sites and recipe-link discovery on their index pages."""

import logging
from typing import List, Optional
from urllib.parse import unquote, urlparse

from fastapi import HTTPException, status

from recipe_keeper.app.schemas.recipe import RecipePreview, RecipeSource
from recipe_keeper.app.services.url_parsing.constants import PLACEHOLDER_IMAGE
from recipe_keeper.app.services.url_parsing.document import DocumentParseError, parse_document
from recipe_keeper.app.services.url_parsing.models import RawPayload
from recipe_keeper.app.services.url_parsing.parsing_utils import resolve_url

logger = logging.getLogger(__name__)

RECIPE_SOURCES = [
    RecipeSource(
        id="aharoni",
        name="ישראל אהרוני",
        url="https://www.israelaharoni.co.il/category/%D7%9E%D7%AA%D7%9B%D7%95%D7%A0%D7%99%D7%9D/",
        logo=PLACEHOLDER_IMAGE,
    ),
]

RECIPE_LINK_MARKER = "recipe"
FALLBACK_PREVIEW_TITLE = "Recipe"


def get_source(source_id: str) -> RecipeSource:
    for source in RECIPE_SOURCES:
        if source.id == source_id:
            return source
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe source not found")


def preview_title(url: str) -> str:
    """Readable title from the last path segment of a recipe URL."""
    segment = urlparse(url).path.rstrip("/").split("/")[-1]
    title = unquote(segment).replace("-", " ").strip()
    return title or FALLBACK_PREVIEW_TITLE


def discover_recipe_links(raw: Optional[RawPayload], base_url: str) -> List[RecipePreview]:
    """Recipe links on an index page, resolved and without duplicates."""
    try:
        doc = parse_document(raw.markup if raw is not None else None)
    except DocumentParseError as exc:
        logger.warning("Could not parse index page %s: %s", base_url, exc)
        return []

    previews: List[RecipePreview] = []
    seen = set()
    for link in doc.select(f'a[href*="{RECIPE_LINK_MARKER}"]'):
        try:
            url = resolve_url(link["href"].strip(), base_url)
        except ValueError:
            continue
        if url in seen:
            continue
        seen.add(url)
        previews.append(RecipePreview(id=url, title=preview_title(url), url=url))
    logger.info("Found %d recipe links on %s", len(previews), base_url)
    return previews
