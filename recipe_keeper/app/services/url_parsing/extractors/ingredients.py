"""Ingredient extraction with sectioned output."""

import re
from typing import List, Optional, Sequence, Tuple

from recipe_keeper.app.services.url_parsing.constants import (
    BOILERPLATE_PHRASES,
    DEFAULT_SECTION_HEADERS,
    DEFAULT_SECTION_TITLE,
    DESCRIPTION_SPLIT_MARKERS,
    HOW_TO_PREPARE_MARKERS,
    INGREDIENTS_MARKERS,
    NAMED_SECTION_HEADERS,
    PAN_SIZE_SECTION_TITLE,
    PREPARATION_HEADING_MARKERS,
    PREPARATION_STEPS_MARKERS,
    SECTION_HEADER_MAX_LENGTH,
)
from recipe_keeper.app.services.url_parsing.document import ParsedDocument, node_lines
from recipe_keeper.app.services.url_parsing.extractors.chain import run_chain
from recipe_keeper.app.services.url_parsing.models import IngredientSection
from recipe_keeper.app.services.url_parsing.parsing_utils import clean_text, contains_any

_INGREDIENTS_LABEL_RE = re.compile(r"^\s*(?:ingredients|מצרכים)\s*:?\s*", re.I)

INGREDIENTS_CONTAINER_SELECTOR = ".ingredients, .recipe-ingredients, .ingredients-container"
INGREDIENT_GROUP_SELECTOR = ".ingredients-group, .ingredient-group, .ingredients-section"
INGREDIENT_GROUP_TITLE_SELECTOR = ".ingredients-group-title, .group-title, h3, h4, h5"
PAN_SIZE_SELECTOR = ".pan-size, .dish-size, .mold-size"


def flatten_sections(sections: Sequence[IngredientSection]) -> List[str]:
    """Flatten sections into one list.

    The default "Ingredients" section contributes its items unprefixed; every
    other section contributes a "<title>:" line followed by its items.
    """
    flattened: List[str] = []
    for section in sections:
        if not section.items:
            continue
        if section.title != DEFAULT_SECTION_TITLE:
            flattened.append(f"{section.title}:")
        flattened.extend(section.items)
    return flattened


def split_description(description: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split a recipe description at its earliest preparation marker."""
    if not description:
        return None
    lowered = description.lower()
    best: Optional[Tuple[int, str]] = None
    for marker in DESCRIPTION_SPLIT_MARKERS:
        index = lowered.find(marker.lower())
        if index != -1 and (best is None or index < best[0]):
            best = (index, marker)
    if best is None:
        return None
    index, marker = best
    return description[:index], description[index + len(marker):]


def meta_description(doc: ParsedDocument) -> Optional[str]:
    return doc.meta_content("description", "og:description", "twitter:description")


def _ingredients_from_meta_description(doc: ParsedDocument) -> List[str]:
    parts = split_description(meta_description(doc))
    if parts is None:
        return []
    before, _ = parts
    items = []
    for piece in re.split(r"[\n,]", before):
        item = clean_text(_INGREDIENTS_LABEL_RE.sub("", piece))
        if item:
            items.append(item)
    return items


def is_preparation_heading(line: str) -> bool:
    """Short line opening the preparation part, e.g. "Preparation:" or "How to make"."""
    if len(line) > SECTION_HEADER_MAX_LENGTH:
        return False
    lowered = line.lower().strip()
    return any(lowered.startswith(marker) for marker in PREPARATION_HEADING_MARKERS + HOW_TO_PREPARE_MARKERS)


def _ingredients_from_marked_paragraphs(doc: ParsedDocument) -> List[str]:
    root = doc.content_root()
    if root is None:
        return []
    items: List[str] = []
    collecting = False
    for paragraph in root.find_all("p"):
        for line in node_lines(paragraph):
            if not collecting:
                if contains_any(line, INGREDIENTS_MARKERS):
                    collecting = True
                    remainder = clean_text(_INGREDIENTS_LABEL_RE.sub("", line))
                    if remainder and remainder != line:
                        items.append(remainder)
                continue
            if contains_any(line, PREPARATION_STEPS_MARKERS) or is_preparation_heading(line):
                return items
            items.append(line)
    return items


def _sections_from_container(doc: ParsedDocument) -> List[IngredientSection]:
    container = doc.select_one(INGREDIENTS_CONTAINER_SELECTOR)
    if container is None:
        return []
    sections: List[IngredientSection] = []
    groups = container.select(INGREDIENT_GROUP_SELECTOR)
    if groups:
        for group in groups:
            title_node = group.select_one(INGREDIENT_GROUP_TITLE_SELECTOR)
            title = clean_text(title_node.get_text(" ")).rstrip(":").strip() if title_node else ""
            items = [clean_text(li.get_text(" ")) for li in group.find_all("li")]
            sections.append(
                IngredientSection(title=title or DEFAULT_SECTION_TITLE, items=[i for i in items if i])
            )
    else:
        items = [clean_text(li.get_text(" ")) for li in container.find_all("li")]
        sections.append(IngredientSection(title=DEFAULT_SECTION_TITLE, items=[i for i in items if i]))

    pan_size = container.select_one(PAN_SIZE_SELECTOR) or doc.select_one(PAN_SIZE_SELECTOR)
    if pan_size is not None:
        size = clean_text(pan_size.get_text(" "))
        if size:
            sections.append(IngredientSection(title=PAN_SIZE_SECTION_TITLE, items=[size]))
    return sections


def _ingredients_from_structured_container(doc: ParsedDocument) -> List[str]:
    return flatten_sections(_sections_from_container(doc))


def _section_header_title(text: str) -> Optional[str]:
    """Section title when text is a known header line, else None."""
    if len(text) >= SECTION_HEADER_MAX_LENGTH:
        return None
    normalized = text.rstrip(":").strip()
    lowered = normalized.lower()
    if any(lowered.startswith(header) for header in DEFAULT_SECTION_HEADERS):
        return DEFAULT_SECTION_TITLE
    if any(lowered.startswith(header) for header in NAMED_SECTION_HEADERS):
        return normalized
    return None


def _sections_from_rtl_paragraphs(doc: ParsedDocument) -> List[IngredientSection]:
    sections: List[IngredientSection] = []
    current: Optional[IngredientSection] = None
    for paragraph in doc.select('p[dir="rtl"], [dir="rtl"] p'):
        text = clean_text(paragraph.get_text(" "))
        if not text:
            continue
        if contains_any(text, HOW_TO_PREPARE_MARKERS):
            break
        title = _section_header_title(text)
        if title is not None:
            current = IngredientSection(title=title)
            sections.append(current)
            continue
        if current is None:
            continue
        if len(text) > 2 and not contains_any(text, BOILERPLATE_PHRASES):
            current.items.append(text)
    return sections


def _ingredients_from_rtl_paragraphs(doc: ParsedDocument) -> List[str]:
    return flatten_sections(_sections_from_rtl_paragraphs(doc))


INGREDIENT_HEURISTICS = (
    _ingredients_from_meta_description,
    _ingredients_from_marked_paragraphs,
    _ingredients_from_structured_container,
    _ingredients_from_rtl_paragraphs,
)


def extract_ingredients(doc: ParsedDocument) -> List[str]:
    return run_chain(doc, INGREDIENT_HEURISTICS, field="ingredients") or []
