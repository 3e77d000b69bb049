"""Instruction extraction."""

import re
from typing import Iterable, List, Optional

from bs4 import Tag

from recipe_keeper.app.services.url_parsing.constants import (
    BOILERPLATE_PHRASES,
    HOW_TO_PREPARE_MARKERS,
    PREPARATION_HEADING_MARKERS,
    VIDEO_LINK_DOMAINS,
)
from recipe_keeper.app.services.url_parsing.document import ParsedDocument, node_lines
from recipe_keeper.app.services.url_parsing.extractors.chain import run_chain
from recipe_keeper.app.services.url_parsing.extractors.ingredients import (
    meta_description,
    split_description,
)
from recipe_keeper.app.services.url_parsing.parsing_utils import (
    clean_text,
    contains_any,
    dedupe,
    strip_step_number,
)

_STEP_SPLIT_RE = re.compile(r"\n|\s(?=\d+\s*[\.\)]\s)")

MARKER_TAGS = ["h2", "h3", "h4", "h5", "h6", "p", "strong", "b", "span"]
MARKER_MAX_LENGTH = 60
SKIPPED_TAGS = {"script", "style", "noscript", "form", "aside", "nav", "iframe"}
INSTRUCTIONS_CONTAINER_SELECTOR = (
    ".instructions, .recipe-instructions, [itemprop='recipeInstructions'], "
    ".preparation, .method, .steps"
)


def clean_steps(lines: Iterable[str]) -> List[str]:
    """Strip step numbers, drop blanks and exact duplicates."""
    steps = (strip_step_number(clean_text(line)) for line in lines)
    return dedupe(step for step in steps if step)


def _links_to_video(node: Tag) -> bool:
    for link in node.find_all("a", href=True):
        if contains_any(link["href"], VIDEO_LINK_DOMAINS):
            return True
    return False


def _instructions_from_meta_description(doc: ParsedDocument) -> List[str]:
    parts = split_description(meta_description(doc))
    if parts is None:
        return []
    _, after = parts
    return clean_steps(_STEP_SPLIT_RE.split(after))


def _find_marker_child(root: Tag) -> Optional[Tag]:
    """Direct child of root holding the preparation heading."""
    for node in root.find_all(MARKER_TAGS):
        text = clean_text(node.get_text(" "))
        if not text or len(text) > MARKER_MAX_LENGTH:
            continue
        if not contains_any(text, PREPARATION_HEADING_MARKERS):
            continue
        while node is not None and node.parent is not root:
            node = node.parent
        if node is not None:
            return node
    return None


def _instructions_after_marker(doc: ParsedDocument) -> List[str]:
    root = doc.content_root()
    if root is None:
        return []
    marker = _find_marker_child(root)
    if marker is None:
        return []
    lines: List[str] = []
    for sibling in marker.find_next_siblings():
        if sibling.name in SKIPPED_TAGS:
            continue
        if sibling.name in ("ul", "ol"):
            nodes = sibling.find_all("li")
        elif sibling.name in ("p", "li"):
            nodes = [sibling]
        else:
            nodes = sibling.find_all(["p", "li"])
        for node in nodes:
            if _links_to_video(node):
                continue
            for line in node_lines(node):
                if contains_any(line, VIDEO_LINK_DOMAINS):
                    continue
                lines.append(line)
    return clean_steps(lines)


def _instructions_from_container(doc: ParsedDocument) -> List[str]:
    container = doc.select_one(INSTRUCTIONS_CONTAINER_SELECTOR)
    if container is None:
        return []
    nodes = container.find_all("li") or container.find_all("p")
    lines = []
    for node in nodes:
        text = clean_text(node.get_text(" "))
        if len(text) > 5 and not contains_any(text, BOILERPLATE_PHRASES):
            lines.append(text)
    return clean_steps(lines)


def _instructions_from_marked_list(doc: ParsedDocument) -> List[str]:
    for ordered in doc.select("ol"):
        previous = ordered.find_previous_sibling()
        if previous is None:
            continue
        if contains_any(previous.get_text(" "), HOW_TO_PREPARE_MARKERS):
            return clean_steps(li.get_text(" ") for li in ordered.find_all("li"))
    return []


INSTRUCTION_HEURISTICS = (
    _instructions_from_meta_description,
    _instructions_after_marker,
    _instructions_from_container,
    _instructions_from_marked_list,
)


def extract_instructions(doc: ParsedDocument) -> List[str]:
    return run_chain(doc, INSTRUCTION_HEURISTICS, field="instructions") or []
