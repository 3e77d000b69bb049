"""Import recipes from URLs: fetch, parse and store."""

import logging
import secrets
import threading
import time
from typing import Awaitable, Callable, Iterable, List, Optional

from recipe_keeper.app.schemas.recipe import BulkImportResult, Recipe
from recipe_keeper.app.services.recipes_service import RecipeStore
from recipe_keeper.app.services.url_parsing.html_fetcher import fetch_page
from recipe_keeper.app.services.url_parsing.models import FetchResult
from recipe_keeper.app.services.url_parsing.recipe_parser import parse_payload

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[FetchResult]]
ProgressCallback = Callable[[int, int], None]

_last_millis = 0
_issued_suffixes = set()
_id_lock = threading.Lock()


class RecipeImportError(Exception):
    """Raised when a URL cannot be fetched for import."""

    def __init__(self, url: str, error_code: Optional[str], message: Optional[str]):
        self.url = url
        self.error_code = error_code or "fetch_failed"
        self.message = message or "Failed to fetch the page."
        super().__init__(f"{url}: {self.message}")


def generate_recipe_id() -> str:
    """Time-prefixed id, never repeated within the process."""
    global _last_millis
    with _id_lock:
        # Ids only collide within one millisecond; remember just the current one.
        millis = max(int(time.time() * 1000), _last_millis)
        if millis != _last_millis:
            _last_millis = millis
            _issued_suffixes.clear()
        while True:
            suffix = secrets.token_hex(4)
            if suffix not in _issued_suffixes:
                _issued_suffixes.add(suffix)
                return f"{millis}-{suffix}"


async def import_recipe(url: str, fetcher: Fetcher = fetch_page) -> Recipe:
    result = await fetcher(url)
    if not result.success or result.data is None:
        raise RecipeImportError(url, result.error_code, result.error)
    parsed = parse_payload(result.data, url)
    return Recipe(id=generate_recipe_id(), **parsed.model_dump())


async def bulk_import(
    urls: Iterable[str],
    store: Optional[RecipeStore] = None,
    fetcher: Fetcher = fetch_page,
    on_progress: Optional[ProgressCallback] = None,
) -> BulkImportResult:
    """Import URLs one after another.

    A failing URL is logged and skipped; the rest still import. Progress is
    reported after every URL as ``on_progress(done, total)``.
    """
    targets = [url for url in urls if url and url.strip()]
    total = len(targets)
    imported: List[Recipe] = []
    for done, url in enumerate(targets, start=1):
        try:
            imported.append(await import_recipe(url.strip(), fetcher))
        except RecipeImportError as exc:
            logger.warning("Skipping %s: %s (%s)", url, exc.message, exc.error_code)
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected failure importing %s", url)
        if on_progress is not None:
            on_progress(done, total)

    if store is not None and imported:
        store.add_recipes(imported)
    logger.info("Bulk import finished: %d of %d imported", len(imported), total)
    return BulkImportResult(
        imported=len(imported),
        failed=total - len(imported),
        total=total,
        recipes=imported,
    )
