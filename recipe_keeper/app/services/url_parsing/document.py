"""Queryable parse tree over fetched markup."""

import json
import logging
import re
from typing import Any, Iterator, List, Optional, Sequence, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from recipe_keeper.app.services.url_parsing.parsing_utils import clean_text, split_lines

logger = logging.getLogger(__name__)

_HAS_TAGS_RE = re.compile(r"<[a-z!][^>]*>", re.I)

PathKey = Union[str, int]


class DocumentParseError(ValueError):
    """Raised when markup cannot be turned into a document at all."""


def node_lines(node: Tag) -> List[str]:
    """Text lines of a node, breaking only on <br> and newlines."""
    parts: List[str] = []
    for element in node.descendants:
        if isinstance(element, Comment):
            continue
        if isinstance(element, NavigableString):
            parts.append(str(element))
        elif element.name == "br":
            parts.append("\n")
    return split_lines("".join(parts))


def json_path(data: Any, path: Sequence[PathKey]) -> Optional[Any]:
    """Walk nested dicts/lists along path, returning None on any miss."""
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict) or key not in current:
                return None
            current = current[key]
    return current


class ParsedDocument:
    """BeautifulSoup tree plus helpers for meta tags and embedded JSON."""

    def __init__(self, soup: BeautifulSoup, markup: str):
        self.soup = soup
        self.markup = markup

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def select_text(self, selector: str) -> Optional[str]:
        node = self.select_one(selector)
        if node is None:
            return None
        return clean_text(node.get_text(" ")) or None

    def meta_content(self, *keys: str) -> Optional[str]:
        """First non-empty content of a meta tag matched by property or name."""
        for key in keys:
            for attr in ("property", "name"):
                tag = self.soup.find("meta", attrs={attr: key})
                if tag is not None and tag.get("content"):
                    content = tag["content"].strip()
                    if content:
                        return content
        return None

    def content_root(self) -> Optional[Tag]:
        """Main content body of the page."""
        return (
            self.soup.select_one(".entry-content")
            or self.soup.select_one(".post-content")
            or self.soup.find("article")
            or self.soup.find("main")
            or self.soup.body
        )

    def json_blocks(self, selector: str = "script") -> Iterator[Any]:
        """Yield parsed JSON from matching script blocks, skipping invalid ones."""
        for script in self.soup.select(selector):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                yield json.loads(raw)
            except json.JSONDecodeError as exc:
                logger.debug("Skipping unparseable JSON block: %s", exc)

    def ld_json_objects(self) -> Iterator[dict]:
        """Flatten JSON-LD blocks, including @graph members, into objects."""
        for data in self.json_blocks('script[type="application/ld+json"]'):
            candidates: List[Any] = []
            if isinstance(data, list):
                candidates.extend(data)
            elif isinstance(data, dict):
                candidates.append(data)
                graph = data.get("@graph")
                if isinstance(graph, list):
                    candidates.extend(graph)
            for obj in candidates:
                if isinstance(obj, dict):
                    yield obj

    def text(self) -> str:
        return clean_text(self.soup.get_text(" "))


def parse_document(markup: Optional[str]) -> ParsedDocument:
    """Build a ParsedDocument or raise DocumentParseError."""
    if not isinstance(markup, str) or not markup.strip():
        raise DocumentParseError("Empty markup")
    if not _HAS_TAGS_RE.search(markup):
        raise DocumentParseError("Markup contains no HTML tags")
    try:
        soup = BeautifulSoup(markup, "lxml")
    except Exception as exc:  # noqa: BLE001
        raise DocumentParseError(f"Unable to parse markup: {exc}") from exc
    if soup.find() is None:
        raise DocumentParseError("Markup produced an empty document")
    return ParsedDocument(soup, markup)
