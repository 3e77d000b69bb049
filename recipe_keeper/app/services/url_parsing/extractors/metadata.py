"""Title, image, credits, site category and prep time extraction."""

import logging
from typing import List, Optional, Tuple

from bs4 import Tag

from recipe_keeper.app.services.url_parsing.constants import PLACEHOLDER_IMAGE
from recipe_keeper.app.services.url_parsing.document import ParsedDocument, json_path
from recipe_keeper.app.services.url_parsing.extractors.chain import run_chain
from recipe_keeper.app.services.url_parsing.parsing_utils import (
    clean_text,
    clean_title,
    coerce_string_list,
    dedupe,
    pick_srcset_url,
    resolve_url,
)

logger = logging.getLogger(__name__)

FEATURED_IMAGE_SELECTOR = (
    "img.wp-post-image, img.featured-image, .featured-image img, .post-image img, "
    ".post-thumbnail img, img[itemprop='image']"
)
PREP_TIME_SELECTOR = (
    "[itemprop='totalTime'], [itemprop='prepTime'], [itemprop='cookTime'], "
    ".prep-time, .cooking-time, .total-time"
)


# Title


def _title_from_meta(doc: ParsedDocument) -> Optional[str]:
    return clean_title(doc.meta_content("og:title", "twitter:title", "title"))


def _title_from_heading(doc: ParsedDocument) -> Optional[str]:
    for selector in ("h1", ".recipe-title", ".entry-title"):
        title = clean_title(doc.select_text(selector))
        if title:
            return title
    return None


def _title_from_document_title(doc: ParsedDocument) -> Optional[str]:
    if doc.soup.title is None:
        return None
    return clean_title(doc.soup.title.get_text())


def _title_from_featured_image_alt(doc: ParsedDocument) -> Optional[str]:
    for img in doc.select(f".featured-media-section img, {FEATURED_IMAGE_SELECTOR}"):
        title = clean_title(img.get("alt"))
        if title:
            return title
    return None


TITLE_HEURISTICS = (
    _title_from_meta,
    _title_from_heading,
    _title_from_document_title,
    _title_from_featured_image_alt,
)


def extract_title(doc: ParsedDocument) -> Optional[str]:
    return run_chain(doc, TITLE_HEURISTICS, field="title")


# Image


def image_source(img: Tag) -> Optional[str]:
    """Best URL of an <img>, preferring the largest srcset candidate."""
    for attr in ("srcset", "data-srcset"):
        url = pick_srcset_url(img.get(attr))
        if url and not url.startswith("data:"):
            return url
    for attr in ("src", "data-src", "data-lazy-src", "data-original"):
        value = (img.get(attr) or "").strip()
        if value and not value.startswith("data:"):
            return value
    return None


def _first_image(doc: ParsedDocument, selector: str) -> Optional[str]:
    for img in doc.select(selector):
        url = image_source(img)
        if url:
            return url
    return None


def _image_from_container(doc: ParsedDocument) -> Optional[str]:
    return _first_image(
        doc, ".image-container img, .recipe-image-container img, .wp-block-image img, figure.image img"
    )


def _image_from_featured_class(doc: ParsedDocument) -> Optional[str]:
    return _first_image(doc, FEATURED_IMAGE_SELECTOR)


def _image_from_media_section(doc: ParsedDocument) -> Optional[str]:
    return _first_image(doc, ".featured-media-section img, .media-section img")


def _image_from_article_body(doc: ParsedDocument) -> Optional[str]:
    return _first_image(doc, "article img, .entry-content img, .recipe-image img, .main-image img, main img")


IMAGE_HEURISTICS = (
    _image_from_container,
    _image_from_featured_class,
    _image_from_media_section,
    _image_from_article_body,
)


def extract_image(doc: ParsedDocument, source_url: str) -> str:
    """Absolute image URL, or the placeholder asset.

    A candidate resolving to a URL that mentions "placeholder" does not count
    and the next heuristic is tried. An unresolvable candidate yields the
    placeholder.
    """
    for heuristic in IMAGE_HEURISTICS:
        try:
            candidate = heuristic(doc)
        except Exception as exc:  # noqa: BLE001
            logger.debug("image heuristic %s failed: %s", heuristic.__name__, exc)
            continue
        if not candidate:
            continue
        try:
            resolved = resolve_url(candidate, source_url)
        except ValueError as exc:
            logger.debug("Image %r not resolvable: %s", candidate, exc)
            return PLACEHOLDER_IMAGE
        if "placeholder" in resolved.lower():
            continue
        return resolved
    return PLACEHOLDER_IMAGE


# Author and credits


def _author_from_meta(doc: ParsedDocument) -> Optional[str]:
    author = doc.meta_content("author", "article:author")
    if author and not author.startswith("http"):
        return clean_text(author)
    return None


def _author_name(value) -> Optional[str]:
    if isinstance(value, str):
        return clean_text(value) or None
    if isinstance(value, dict):
        name = json_path(value, ["name"])
        return clean_text(name) if isinstance(name, str) and name.strip() else None
    if isinstance(value, list):
        names = [name for name in (_author_name(item) for item in value) if name]
        return ", ".join(names) or None
    return None


def _author_from_structured_data(doc: ParsedDocument) -> Optional[str]:
    for obj in doc.ld_json_objects():
        name = _author_name(obj.get("author"))
        if name:
            return name
    return None


def _author_from_markup(doc: ParsedDocument) -> Optional[str]:
    return doc.select_text("[itemprop='author']") or doc.select_text(".author, .recipe-author")


AUTHOR_HEURISTICS = (
    _author_from_meta,
    _author_from_structured_data,
    _author_from_markup,
)


def extract_credits(doc: ParsedDocument) -> Tuple[Optional[str], Optional[str]]:
    """Return (author, credits)."""
    author = run_chain(doc, AUTHOR_HEURISTICS, field="author")
    credits = None
    try:
        credits = doc.select_text(".credits, .recipe-credits")
    except Exception as exc:  # noqa: BLE001
        logger.debug("credits lookup failed: %s", exc)
    return author, credits


# Site taxonomy


def _categories_from_structured_data(doc: ParsedDocument) -> List[str]:
    categories: List[str] = []
    for obj in doc.ld_json_objects():
        categories.extend(coerce_string_list(obj.get("articleSection")))
        categories.extend(coerce_string_list(obj.get("keywords")))
    return dedupe(categories)


def _categories_from_links(doc: ParsedDocument) -> List[str]:
    names = [
        clean_text(link.get_text(" "))
        for link in doc.select(".categories a, .breadcrumbs a, .breadcrumb a, nav.breadcrumbs a")
    ]
    return dedupe(name for name in names if name)


SITE_CATEGORY_HEURISTICS = (
    _categories_from_structured_data,
    _categories_from_links,
)


def extract_site_categories(doc: ParsedDocument) -> List[str]:
    return run_chain(doc, SITE_CATEGORY_HEURISTICS, field="site_categories") or []


def extract_prep_time(doc: ParsedDocument) -> Optional[str]:
    try:
        node = doc.select_one(PREP_TIME_SELECTOR)
    except Exception as exc:  # noqa: BLE001
        logger.debug("prep time lookup failed: %s", exc)
        return None
    if node is None:
        return None
    return clean_text(node.get_text(" ")) or clean_text(node.get("content")) or None
