from typing import List

from pydantic import BaseModel, Field

from recipe_keeper.app.services.url_parsing.models import ParsedRecipe


class RecipeUpdate(ParsedRecipe):
    """Full replacement payload for a stored recipe."""


class Recipe(ParsedRecipe):
    id: str


class ImportUrlRequest(BaseModel):
    url: str


class BulkImportRequest(BaseModel):
    urls: List[str] = Field(default_factory=list)


class BulkImportResult(BaseModel):
    imported: int
    failed: int
    total: int
    recipes: List[Recipe] = Field(default_factory=list)


class RecipeSource(BaseModel):
    id: str
    name: str
    url: str
    logo: str


class RecipePreview(BaseModel):
    id: str
    title: str
    url: str


class CategoryList(BaseModel):
    categories: List[str]
