import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from recipe_keeper.app.api.deps import get_fetcher, get_recipe_store
from recipe_keeper.app.schemas.recipe import (
    BulkImportRequest,
    BulkImportResult,
    ImportUrlRequest,
    Recipe,
    RecipePreview,
    RecipeSource,
)
from recipe_keeper.app.services import import_service, source_catalog
from recipe_keeper.app.services.import_service import Fetcher, RecipeImportError
from recipe_keeper.app.services.recipes_service import RecipeStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes/import", tags=["import"])

FETCH_FAILED_MESSAGE = "Could not fetch the page. Check the link and try again."


@router.post("/url", response_model=Recipe, status_code=status.HTTP_201_CREATED)
async def import_from_url(
    payload: ImportUrlRequest,
    store: RecipeStore = Depends(get_recipe_store),
    fetcher: Fetcher = Depends(get_fetcher),
):
    try:
        recipe = await import_service.import_recipe(payload.url, fetcher)
    except RecipeImportError as exc:
        logger.info("Import of %s failed: %s (%s)", payload.url, exc.message, exc.error_code)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=FETCH_FAILED_MESSAGE)
    return store.add_recipe(recipe)


@router.post("/bulk", response_model=BulkImportResult)
async def import_bulk(
    payload: BulkImportRequest,
    store: RecipeStore = Depends(get_recipe_store),
    fetcher: Fetcher = Depends(get_fetcher),
):
    return await import_service.bulk_import(payload.urls, store=store, fetcher=fetcher)


@router.get("/sources", response_model=List[RecipeSource])
def list_sources():
    return source_catalog.RECIPE_SOURCES


@router.get("/sources/{source_id}/links", response_model=List[RecipePreview])
async def list_source_links(source_id: str, fetcher: Fetcher = Depends(get_fetcher)):
    source = source_catalog.get_source(source_id)
    result = await fetcher(source.url)
    if not result.success:
        logger.info("Could not fetch source %s: %s (%s)", source_id, result.error, result.error_code)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=FETCH_FAILED_MESSAGE)
    return source_catalog.discover_recipe_links(result.data, source.url)
