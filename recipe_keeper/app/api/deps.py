from functools import lru_cache

from recipe_keeper.app.core.config import get_settings
from recipe_keeper.app.services.import_service import Fetcher
from recipe_keeper.app.services.recipes_service import RecipeStore
from recipe_keeper.app.services.storage.base import KeyValueStore
from recipe_keeper.app.services.storage.local import LocalKeyValueStore
from recipe_keeper.app.services.url_parsing.html_fetcher import fetch_page


def get_key_value_store() -> KeyValueStore:
    settings = get_settings()
    return LocalKeyValueStore(settings.store_root)


@lru_cache
def get_recipe_store() -> RecipeStore:
    settings = get_settings()
    return RecipeStore(get_key_value_store(), key=settings.store_key)


def get_fetcher() -> Fetcher:
    return fetch_page
