import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from recipe_keeper.app.api.deps import get_recipe_store
from recipe_keeper.app.schemas.recipe import CategoryList, Recipe, RecipeUpdate
from recipe_keeper.app.services.recipes_service import RecipeStore
from recipe_keeper.app.services.url_parsing.classifier import default_classifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("", response_model=List[Recipe])
def list_recipes(
    q: Optional[str] = None,
    category: Optional[str] = None,
    store: RecipeStore = Depends(get_recipe_store),
):
    return store.search_recipes(query=q, category=category)


@router.get("/categories", response_model=CategoryList)
def list_categories():
    return CategoryList(categories=[*default_classifier.categories, default_classifier.default])


@router.get("/{recipe_id}", response_model=Recipe)
def get_recipe(recipe_id: str, store: RecipeStore = Depends(get_recipe_store)):
    return store.get_recipe(recipe_id)


@router.put("/{recipe_id}", response_model=Recipe)
def update_recipe(
    recipe_id: str,
    payload: RecipeUpdate,
    store: RecipeStore = Depends(get_recipe_store),
):
    return store.update_recipe(recipe_id, payload)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(recipe_id: str, store: RecipeStore = Depends(get_recipe_store)):
    store.delete_recipe(recipe_id)
    logger.info("Deleted recipe %s", recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
