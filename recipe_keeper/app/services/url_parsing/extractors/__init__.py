"""Field extractors, one fallback chain per recipe field."""

from recipe_keeper.app.services.url_parsing.extractors.chain import run_chain
from recipe_keeper.app.services.url_parsing.extractors.ingredients import (
    extract_ingredients,
    flatten_sections,
)
from recipe_keeper.app.services.url_parsing.extractors.instructions import extract_instructions
from recipe_keeper.app.services.url_parsing.extractors.metadata import (
    extract_credits,
    extract_image,
    extract_prep_time,
    extract_site_categories,
    extract_title,
)
from recipe_keeper.app.services.url_parsing.extractors.short_video import (
    extract_short_video_content,
    split_caption,
)
from recipe_keeper.app.services.url_parsing.extractors.video import (
    extract_video,
    normalize_embed_url,
)

__all__ = [
    "extract_credits",
    "extract_image",
    "extract_ingredients",
    "extract_instructions",
    "extract_prep_time",
    "extract_short_video_content",
    "extract_site_categories",
    "extract_title",
    "extract_video",
    "flatten_sections",
    "normalize_embed_url",
    "run_chain",
    "split_caption",
]
