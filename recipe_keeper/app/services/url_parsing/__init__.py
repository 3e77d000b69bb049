"""URL recipe parsing package.

This package turns a fetched page into a normalized recipe record using one of
two strategies: generic HTML heuristics for blog-style recipe pages, and
caption parsing for short-video (TikTok) pages.
"""

from recipe_keeper.app.services.url_parsing.classifier import (
    CategoryClassifier,
    classify_payload,
    default_classifier,
    determine_category,
)
from recipe_keeper.app.services.url_parsing.document import (
    DocumentParseError,
    ParsedDocument,
    parse_document,
)
from recipe_keeper.app.services.url_parsing.html_fetcher import (
    fetch_page,
    is_private_host,
    validate_url,
)
from recipe_keeper.app.services.url_parsing.models import (
    FetchResult,
    FetchStatus,
    IngredientSection,
    ParsedRecipe,
    ParseStrategy,
    RawPayload,
    ShortVideoContent,
    VideoEmbed,
)
from recipe_keeper.app.services.url_parsing.parsing_utils import (
    clean_text,
    clean_title,
    resolve_url,
    source_from_url,
)
from recipe_keeper.app.services.url_parsing.recipe_parser import (
    default_recipe,
    parse_payload,
    parse_recipe,
    parse_short_video_recipe,
)

__all__ = [
    # Models
    "FetchResult",
    "FetchStatus",
    "IngredientSection",
    "ParsedRecipe",
    "ParseStrategy",
    "RawPayload",
    "ShortVideoContent",
    "VideoEmbed",
    # Fetching
    "fetch_page",
    "is_private_host",
    "validate_url",
    # Documents
    "DocumentParseError",
    "ParsedDocument",
    "parse_document",
    # Classification
    "CategoryClassifier",
    "classify_payload",
    "default_classifier",
    "determine_category",
    # Assembly
    "default_recipe",
    "parse_payload",
    "parse_recipe",
    "parse_short_video_recipe",
    # Parsing utilities
    "clean_text",
    "clean_title",
    "resolve_url",
    "source_from_url",
]
