import importlib

from fastapi import APIRouter

from recipe_keeper.app.api.routes import recipes

import_routes = importlib.import_module("recipe_keeper.app.api.routes.import")

api_router = APIRouter()
api_router.include_router(import_routes.router)
api_router.include_router(recipes.router)
