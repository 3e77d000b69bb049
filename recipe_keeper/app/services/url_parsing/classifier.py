"""Parsing strategy selection and keyword category classification."""

import re
from typing import Optional, Sequence, Tuple

from recipe_keeper.app.services.url_parsing.constants import CATEGORY_KEYWORDS, DEFAULT_CATEGORY
from recipe_keeper.app.services.url_parsing.models import ParseStrategy, RawPayload

SHORT_VIDEO_URL_RE = re.compile(r"tiktok\.com/(?:@[^/]+/)?(?:video|v|embed(?:/v2)?)/(\d+)", re.I)
SHORT_VIDEO_STATE_MARKERS = (
    'id="SIGI_STATE"',
    "id='SIGI_STATE'",
    "__UNIVERSAL_DATA_FOR_REHYDRATION__",
    '"itemStruct"',
)

CategoryTable = Sequence[Tuple[str, Sequence[str]]]


def short_video_id_from_url(url: Optional[str]) -> Optional[str]:
    """Numeric video id from a short-video watch URL."""
    match = SHORT_VIDEO_URL_RE.search(url or "")
    return match.group(1) if match else None


def classify_payload(source_url: str, raw: Optional[RawPayload]) -> ParseStrategy:
    """Pick the parsing strategy for a payload."""
    if short_video_id_from_url(source_url):
        return ParseStrategy.SHORT_VIDEO
    markup = raw.markup if raw is not None else ""
    if markup and any(marker in markup for marker in SHORT_VIDEO_STATE_MARKERS):
        return ParseStrategy.SHORT_VIDEO
    return ParseStrategy.GENERIC_HTML


class CategoryClassifier:
    """Maps recipe text to the first category whose keywords it contains.

    The table is ordered; when text matches several categories the one
    declared first wins regardless of how many keywords matched.
    """

    def __init__(self, table: CategoryTable = CATEGORY_KEYWORDS, default: str = DEFAULT_CATEGORY):
        self.table: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(
            (category, tuple(keyword.lower() for keyword in keywords)) for category, keywords in table
        )
        self.default = default

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(category for category, _ in self.table)

    def classify(self, title: Optional[str], content: Optional[str]) -> str:
        text = f"{title or ''} {content or ''}".lower()
        for category, keywords in self.table:
            if any(keyword in text for keyword in keywords):
                return category
        return self.default


default_classifier = CategoryClassifier()


def determine_category(title: Optional[str], content: Optional[str]) -> str:
    return default_classifier.classify(title, content)
