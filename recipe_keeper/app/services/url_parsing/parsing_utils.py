"""General parsing utilities for recipe extraction."""

import re
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

from recipe_keeper.app.services.url_parsing.constants import (
    DEFAULT_SOURCE,
    PLATFORM_TITLE_SUFFIXES,
)

_STEP_NUMBER_RE = re.compile(r"^\s*\d+\s*[\.\)]\s*")
_HASHTAG_RE = re.compile("#[\\w\\u0590-\\u05ff]+")
_PLATFORM_SUFFIX_RE = re.compile(
    r"\s*[-|–—:]\s*(?:%s)\s*$" % "|".join(PLATFORM_TITLE_SUFFIXES), re.I
)
_SRCSET_DESCRIPTOR_RE = re.compile(r"^(\d+(?:\.\d+)?)([wx])$", re.I)


def clean_text(text: Optional[str]) -> str:
    """Normalize whitespace in text."""
    return re.sub(r"\s+", " ", text or "").strip()


def contains_any(text: str, phrases: Iterable[str]) -> bool:
    """Case-insensitive substring test against several phrases."""
    lowered = (text or "").lower()
    return any(phrase.lower() in lowered for phrase in phrases)


def split_lines(text: Optional[str]) -> List[str]:
    """Split text on newlines, dropping blank lines."""
    return [clean_text(line) for line in (text or "").splitlines() if clean_text(line)]


def strip_step_number(text: str) -> str:
    """Remove a leading step number such as "1." or "2)"."""
    return _STEP_NUMBER_RE.sub("", text or "").strip()


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop exact duplicates while keeping the first occurrence."""
    seen = set()
    unique: List[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        unique.append(item)
    return unique


def clean_title(text: Optional[str]) -> str:
    """Strip hashtags and platform suffixes, cut at the first pipe."""
    title = _HASHTAG_RE.sub(" ", text or "")
    title = _PLATFORM_SUFFIX_RE.sub("", title.strip())
    title = title.split("|", 1)[0]
    return clean_text(title)


def pick_srcset_url(srcset: Optional[str]) -> Optional[str]:
    """Pick the largest candidate from a srcset attribute.

    Candidates are comma separated "url descriptor" pairs. The candidate with
    the largest width/density descriptor wins; without descriptors the first
    URL is used.
    """
    if not srcset:
        return None
    best_url: Optional[str] = None
    best_size = -1.0
    for candidate in srcset.split(","):
        parts = candidate.strip().split()
        if not parts:
            continue
        url = parts[0]
        size = 0.0
        if len(parts) > 1:
            match = _SRCSET_DESCRIPTOR_RE.match(parts[1])
            if match:
                size = float(match.group(1))
        if best_url is None or size > best_size:
            best_url = url
            best_size = size
    return best_url


def resolve_url(url: str, base_url: str) -> str:
    """Resolve a possibly relative URL against base_url.

    Raises ValueError when the result is not an absolute http(s) URL.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise ValueError("Empty URL")
    if candidate.startswith("http://") or candidate.startswith("https://"):
        resolved = candidate
    else:
        resolved = urljoin(base_url, candidate)
    parsed = urlparse(resolved)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"Could not resolve {url!r} against {base_url!r}")
    return resolved


def source_from_url(url: Optional[str]) -> str:
    """Hostname of url with a leading "www." stripped."""
    try:
        hostname = urlparse(url or "").hostname
    except ValueError:
        return DEFAULT_SOURCE
    if not hostname:
        return DEFAULT_SOURCE
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname or DEFAULT_SOURCE


def coerce_string_list(value) -> List[str]:
    """Flatten a JSON value of strings or comma separated strings."""
    items: List[str] = []
    if isinstance(value, str):
        items = [clean_text(part) for part in value.split(",")]
    elif isinstance(value, Sequence):
        for entry in value:
            if isinstance(entry, str):
                items.extend(clean_text(part) for part in entry.split(","))
    return [item for item in items if item]
