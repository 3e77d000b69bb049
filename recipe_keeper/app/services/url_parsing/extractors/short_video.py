"""Short-video (TikTok) caption extraction."""

import logging
import re
from typing import List, Optional, Tuple

from recipe_keeper.app.services.url_parsing.classifier import short_video_id_from_url
from recipe_keeper.app.services.url_parsing.constants import (
    CAPTION_INGREDIENT_MARKERS,
    CAPTION_INSTRUCTION_MARKERS,
    CAPTION_MARKER_MAX_LENGTH,
)
from recipe_keeper.app.services.url_parsing.document import ParsedDocument, json_path
from recipe_keeper.app.services.url_parsing.extractors.chain import run_chain
from recipe_keeper.app.services.url_parsing.extractors.video import tiktok_embed_url
from recipe_keeper.app.services.url_parsing.models import ShortVideoContent
from recipe_keeper.app.services.url_parsing.parsing_utils import clean_title, split_lines

logger = logging.getLogger(__name__)

_BULLET_RE = re.compile(r"^[-•*·]+\s*")
_LEADING_SYMBOLS_RE = re.compile(r"^\W+")
_INGREDIENT_LINE_RE = re.compile(
    r"^[-•*·]|^\d"
    r"|\b(?:grams?|gr|g|kg|ml|cups?|teaspoons?|tsp|tablespoons?|tbsp)\b"
    r'|גרם|כפית|כפיות|כף|כפות|כוס|כוסות|מ"ל|ק"ג',
    re.I,
)
LONG_LINE_MIN_LENGTH = 10


def _item_from_page_props(doc: ParsedDocument) -> Optional[dict]:
    for data in doc.json_blocks('script[type="application/json"]'):
        item = json_path(data, ["props", "pageProps", "itemInfo", "itemStruct"])
        if isinstance(item, dict):
            return item
    return None


def _item_from_sigi_state(doc: ParsedDocument) -> Optional[dict]:
    for data in doc.json_blocks("script#SIGI_STATE"):
        module = json_path(data, ["ItemModule"])
        if isinstance(module, dict):
            for item in module.values():
                if isinstance(item, dict):
                    return item
    return None


def _item_from_rehydration_data(doc: ParsedDocument) -> Optional[dict]:
    for data in doc.json_blocks("script#__UNIVERSAL_DATA_FOR_REHYDRATION__"):
        item = json_path(data, ["__DEFAULT_SCOPE__", "webapp.video-detail", "itemInfo", "itemStruct"])
        if isinstance(item, dict):
            return item
    return None


def _item_author(item: dict) -> Optional[str]:
    author = item.get("author")
    if isinstance(author, dict):
        author = author.get("nickname") or author.get("uniqueId")
    if isinstance(author, str) and author.strip():
        return author.strip()
    return None


STATE_HEURISTICS = (
    _item_from_page_props,
    _item_from_sigi_state,
    _item_from_rehydration_data,
)


def caption_title(description: Optional[str]) -> str:
    """First caption line with hashtags removed."""
    for line in split_lines(description):
        title = clean_title(line)
        if title:
            return title
    return ""


def extract_short_video_content(doc: ParsedDocument, source_url: str) -> Optional[ShortVideoContent]:
    """Caption, title and embed URL from the state blob or meta tags."""
    item = run_chain(doc, STATE_HEURISTICS, field="short_video_state")
    if item:
        description = item.get("desc") if isinstance(item.get("desc"), str) else ""
        raw_id = item.get("id")
        video_id = str(raw_id) if raw_id else short_video_id_from_url(source_url)
        return ShortVideoContent(
            title=caption_title(description),
            description=description,
            video_id=video_id,
            embed_url=tiktok_embed_url(video_id) if video_id else None,
            author=_item_author(item),
        )

    video_id = short_video_id_from_url(source_url) or short_video_id_from_url(doc.meta_content("og:url"))
    if not video_id:
        logger.debug("No short-video state or video id for %s", source_url)
        return None
    description = doc.meta_content("og:description", "description") or ""
    title = clean_title(doc.meta_content("og:title", "twitter:title")) or caption_title(description)
    return ShortVideoContent(
        title=title,
        description=description,
        video_id=video_id,
        embed_url=tiktok_embed_url(video_id),
    )


def _marker_section(line: str) -> Optional[str]:
    """Section named by a marker line: one that starts with a marker, or ends
    with a colon and mentions one."""
    if len(line) > CAPTION_MARKER_MAX_LENGTH:
        return None
    lowered = _LEADING_SYMBOLS_RE.sub("", line.lower())
    is_heading = lowered.rstrip().endswith(":")
    for section, markers in (
        ("ingredients", CAPTION_INGREDIENT_MARKERS),
        ("instructions", CAPTION_INSTRUCTION_MARKERS),
    ):
        for marker in markers:
            if lowered.startswith(marker) or (is_heading and marker in lowered):
                return section
    return None


def _split_by_markers(lines: List[str]) -> Tuple[List[str], List[str]]:
    sections = {"ingredients": [], "instructions": []}
    current: Optional[str] = None
    for line in lines:
        section = _marker_section(line)
        if section is not None:
            current = section
            _, _, remainder = line.partition(":")
            remainder = _BULLET_RE.sub("", remainder.strip())
            if remainder:
                sections[current].append(remainder)
            continue
        if current is not None and len(line) > 1:
            sections[current].append(_BULLET_RE.sub("", line))
    return sections["ingredients"], sections["instructions"]


def _split_by_shape(lines: List[str]) -> Tuple[List[str], List[str]]:
    ingredients: List[str] = []
    instructions: List[str] = []
    seen_pattern = False
    for line in lines:
        if _INGREDIENT_LINE_RE.search(line):
            ingredients.append(_BULLET_RE.sub("", line))
            seen_pattern = True
        elif seen_pattern and len(line) > LONG_LINE_MIN_LENGTH:
            instructions.append(line)
        elif not seen_pattern and len(line) > 1:
            ingredients.append(line)
    return ingredients, instructions


def split_caption(description: Optional[str]) -> Tuple[List[str], List[str]]:
    """Split a free-text caption into (ingredients, instructions).

    Explicit section markers are tried first. Without them every line is
    classified by shape: bullets, leading numbers and units mark ingredients,
    and long lines after the first such line are instructions.
    """
    lines = split_lines(description)
    ingredients, instructions = _split_by_markers(lines)
    if ingredients or instructions:
        return ingredients, instructions
    return _split_by_shape(lines)
