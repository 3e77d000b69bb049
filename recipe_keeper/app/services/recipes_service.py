import logging
import threading
from typing import Iterable, List, Optional

from fastapi import HTTPException, status
from pydantic import ValidationError

from recipe_keeper.app.schemas.recipe import Recipe, RecipeUpdate
from recipe_keeper.app.services.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_STORE_KEY = "recipes"


class RecipeStore:
    """Recipe collection persisted as a JSON list under one store key.

    The list is loaded on first access and rewritten after every mutation.
    Mutations write the new list first and only then replace the cached one,
    so a failed write leaves the store as it was.
    """

    def __init__(self, backend: KeyValueStore, key: str = DEFAULT_STORE_KEY):
        self.backend = backend
        self.key = key
        self._recipes: Optional[List[Recipe]] = None
        self._lock = threading.RLock()

    def _load(self) -> List[Recipe]:
        with self._lock:
            if self._recipes is None:
                stored = self.backend.get(self.key) or []
                recipes = []
                for item in stored if isinstance(stored, list) else []:
                    try:
                        recipes.append(Recipe.model_validate(item))
                    except ValidationError as exc:
                        logger.warning("Skipping invalid stored recipe: %s", exc)
                self._recipes = recipes
                logger.debug("Loaded %d recipes from %s", len(recipes), self.key)
            return self._recipes

    def _commit(self, recipes: List[Recipe]) -> None:
        # Caller holds the lock.
        self.backend.set(self.key, [recipe.model_dump(mode="json") for recipe in recipes])
        self._recipes = recipes

    def _index(self, recipes: List[Recipe], recipe_id: str) -> int:
        for index, recipe in enumerate(recipes):
            if recipe.id == recipe_id:
                return index
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")

    def list_recipes(self) -> List[Recipe]:
        return list(self._load())

    def get_recipe(self, recipe_id: str) -> Recipe:
        recipes = self._load()
        return recipes[self._index(recipes, recipe_id)]

    def add_recipe(self, recipe: Recipe) -> Recipe:
        return self.add_recipes([recipe])[0]

    def add_recipes(self, recipes: Iterable[Recipe]) -> List[Recipe]:
        added = list(recipes)
        if added:
            with self._lock:
                self._commit(self._load() + added)
        return added

    def update_recipe(self, recipe_id: str, data: RecipeUpdate) -> Recipe:
        recipe = Recipe(id=recipe_id, **data.model_dump())
        with self._lock:
            recipes = list(self._load())
            recipes[self._index(recipes, recipe_id)] = recipe
            self._commit(recipes)
        return recipe

    def delete_recipe(self, recipe_id: str) -> None:
        with self._lock:
            recipes = list(self._load())
            del recipes[self._index(recipes, recipe_id)]
            self._commit(recipes)

    def search_recipes(self, query: Optional[str] = None, category: Optional[str] = None) -> List[Recipe]:
        """Case-insensitive title search, optionally limited to one category."""
        needle = (query or "").strip().lower()
        results = []
        for recipe in self._load():
            if needle and needle not in recipe.title.lower():
                continue
            if category and recipe.category != category:
                continue
            results.append(recipe)
        return results
