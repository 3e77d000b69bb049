import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Keep the default store out of the working tree; must run before the app is imported.
os.environ.setdefault("RECIPE_STORE_ROOT", tempfile.mkdtemp(prefix="recipe-keeper-tests-"))

from recipe_keeper.app.api.deps import get_fetcher, get_recipe_store  # noqa: E402
from recipe_keeper.app.main import create_app  # noqa: E402
from recipe_keeper.app.services.recipes_service import RecipeStore  # noqa: E402
from recipe_keeper.app.services.storage.local import LocalKeyValueStore  # noqa: E402
from recipe_keeper.app.services.url_parsing.models import FetchResult, RawPayload  # noqa: E402

RECIPE_PAGE = """
<html>
  <head>
    <title>Lemon Drizzle Cake | Sunny Kitchen</title>
    <meta property="og:title" content="Lemon Drizzle Cake | Sunny Kitchen">
    <meta name="author" content="Dana Levi">
    <script type="application/ld+json">
    {"@context": "https://schema.org", "@graph": [{"@type": "Article", "articleSection": "Cakes", "keywords": "lemon, baking"}]}
    </script>
  </head>
  <body>
    <article>
      <div class="image-container"><img src="../img/lemon-cake.jpg" alt="Lemon cake"></div>
      <div class="ingredients">
        <ul><li>200 g flour</li><li>150 g sugar</li></ul>
        <div class="pan-size">22 cm loaf pan</div>
      </div>
      <h2>Preparation</h2>
      <ol>
        <li>1. Preheat the oven to 180C.</li>
        <li>2. Mix and bake for 40 minutes.</li>
      </ol>
      <span class="prep-time">1 hour</span>
      <iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ"></iframe>
    </article>
  </body>
</html>
"""


class FakeFetcher:
    """Serves canned markup by URL; unknown URLs fail like a 404."""

    def __init__(self, pages=None, default=None):
        self.pages = dict(pages or {})
        self.default = default
        self.calls = []

    async def __call__(self, url: str) -> FetchResult:
        self.calls.append(url)
        markup = self.pages.get(url, self.default)
        if markup is None:
            return FetchResult(success=False, error="Site returned status 404.", error_code="fetch_failed")
        return FetchResult(success=True, data=RawPayload(source_url=url, markup=markup))


@pytest.fixture
def recipe_page():
    return RECIPE_PAGE


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def store(tmp_path):
    return RecipeStore(LocalKeyValueStore(tmp_path))


@pytest.fixture
def app(store, fake_fetcher):
    app = create_app()

    def override_store():
        return store

    def override_fetcher():
        return fake_fetcher

    app.dependency_overrides[get_recipe_store] = override_store
    app.dependency_overrides[get_fetcher] = override_fetcher
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
