"""Ordered fallback chains of extraction heuristics."""

import logging
from typing import Callable, Optional, Sequence, TypeVar

from recipe_keeper.app.services.url_parsing.document import ParsedDocument

logger = logging.getLogger(__name__)

T = TypeVar("T")

Heuristic = Callable[[ParsedDocument], Optional[T]]


def run_chain(doc: ParsedDocument, heuristics: Sequence[Heuristic], field: str = "field") -> Optional[T]:
    """Return the first non-empty result; a heuristic that raises counts as a miss."""
    for heuristic in heuristics:
        name = getattr(heuristic, "__name__", repr(heuristic))
        try:
            value = heuristic(doc)
        except Exception as exc:  # noqa: BLE001
            logger.debug("%s heuristic %s failed: %s", field, name, exc)
            continue
        if value:
            logger.debug("%s resolved by %s", field, name)
            return value
    logger.debug("%s: no heuristic matched", field)
    return None
