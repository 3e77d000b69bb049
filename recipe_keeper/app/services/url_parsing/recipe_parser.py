"""Recipe assembly: runs the extractors and normalizes their output.

Both public entry points are total. Any failure, including markup that cannot
be parsed at all, produces a fully defaulted ParsedRecipe tagged with the
source URL instead of an exception.
"""

import logging
from typing import Optional

from recipe_keeper.app.services.url_parsing.classifier import (
    CategoryClassifier,
    classify_payload,
    default_classifier,
    short_video_id_from_url,
)
from recipe_keeper.app.services.url_parsing.constants import DEFAULT_TITLE
from recipe_keeper.app.services.url_parsing.document import (
    DocumentParseError,
    ParsedDocument,
    parse_document,
)
from recipe_keeper.app.services.url_parsing.extractors import (
    extract_credits,
    extract_image,
    extract_ingredients,
    extract_instructions,
    extract_prep_time,
    extract_short_video_content,
    extract_site_categories,
    extract_title,
    extract_video,
    split_caption,
)
from recipe_keeper.app.services.url_parsing.extractors.video import tiktok_embed_url
from recipe_keeper.app.services.url_parsing.models import ParsedRecipe, ParseStrategy, RawPayload
from recipe_keeper.app.services.url_parsing.parsing_utils import source_from_url

logger = logging.getLogger(__name__)

SHORT_VIDEO_SITE_CATEGORY = "TikTok"


def default_recipe(source_url: Optional[str]) -> ParsedRecipe:
    """All-default record for a URL."""
    url = source_url or ""
    return ParsedRecipe(source_url=url, source=source_from_url(url))


def _markup(raw: Optional[RawPayload]) -> Optional[str]:
    return raw.markup if raw is not None else None


def _assemble_generic(
    doc: ParsedDocument, source_url: str, classifier: CategoryClassifier
) -> ParsedRecipe:
    title = extract_title(doc) or DEFAULT_TITLE
    author, credits = extract_credits(doc)
    video = extract_video(doc)
    recipe = ParsedRecipe(
        title=title,
        ingredients=extract_ingredients(doc),
        instructions=extract_instructions(doc),
        image=extract_image(doc, source_url),
        category=classifier.classify(title, doc.text()),
        prep_time=extract_prep_time(doc),
        source=source_from_url(source_url),
        source_url=source_url,
        youtube_url=video.url if video and video.platform == "youtube" else None,
        tiktok_url=video.url if video and video.platform == "tiktok" else None,
        author=author,
        credits=credits,
        site_categories=extract_site_categories(doc),
    )
    logger.info(
        "Parsed %s: title=%s, ingredients=%d, instructions=%d",
        source_url,
        recipe.title[:50],
        len(recipe.ingredients),
        len(recipe.instructions),
    )
    return recipe


def _assemble_short_video(
    doc: ParsedDocument, source_url: str, classifier: CategoryClassifier
) -> Optional[ParsedRecipe]:
    content = extract_short_video_content(doc, source_url)
    if content is None:
        return None
    ingredients, instructions = split_caption(content.description)
    title = content.title or DEFAULT_TITLE
    logger.info(
        "Parsed short video %s: ingredients=%d, instructions=%d, embed=%s",
        source_url,
        len(ingredients),
        len(instructions),
        content.embed_url,
    )
    return ParsedRecipe(
        title=title,
        ingredients=ingredients,
        instructions=instructions,
        category=classifier.classify(title, content.description),
        source=source_from_url(source_url),
        source_url=source_url,
        tiktok_url=content.embed_url,
        author=content.author,
        site_categories=[SHORT_VIDEO_SITE_CATEGORY],
    )


def parse_recipe(
    raw: Optional[RawPayload],
    source_url: Optional[str],
    classifier: CategoryClassifier = default_classifier,
) -> ParsedRecipe:
    """Generic HTML strategy."""
    url = source_url or ""
    try:
        doc = parse_document(_markup(raw))
        return _assemble_generic(doc, url, classifier)
    except DocumentParseError as exc:
        logger.warning("Could not parse payload for %s: %s", url, exc)
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected failure parsing %s", url)
    return default_recipe(url)


def parse_short_video_recipe(
    raw: Optional[RawPayload],
    source_url: Optional[str],
    classifier: CategoryClassifier = default_classifier,
) -> ParsedRecipe:
    """Short-video strategy: caption based ingredients and instructions."""
    url = source_url or ""
    try:
        doc = parse_document(_markup(raw))
        recipe = _assemble_short_video(doc, url, classifier)
        if recipe is not None:
            return recipe
        logger.info("No short-video content found for %s", url)
    except DocumentParseError as exc:
        logger.warning("Could not parse short-video payload for %s: %s", url, exc)
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected failure parsing short video %s", url)
    recipe = default_recipe(url)
    video_id = short_video_id_from_url(url)
    if video_id:
        recipe.tiktok_url = tiktok_embed_url(video_id)
        recipe.site_categories = [SHORT_VIDEO_SITE_CATEGORY]
    return recipe


def parse_payload(
    raw: Optional[RawPayload],
    source_url: Optional[str],
    classifier: CategoryClassifier = default_classifier,
) -> ParsedRecipe:
    """Pick a strategy for the payload and parse it.

    A payload classified as short video that yields no caption content is
    parsed again with the generic strategy.
    """
    url = source_url or ""
    strategy = classify_payload(url, raw)
    logger.debug("Strategy for %s: %s", url, strategy.value)
    if strategy is ParseStrategy.SHORT_VIDEO:
        try:
            doc = parse_document(_markup(raw))
            recipe = _assemble_short_video(doc, url, classifier)
            if recipe is not None:
                return recipe
            return _assemble_generic(doc, url, classifier)
        except DocumentParseError:
            return parse_short_video_recipe(raw, url, classifier)
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected failure parsing %s", url)
            return default_recipe(url)
    return parse_recipe(raw, url, classifier)
