import json

import pytest

from recipe_importer.app.core.config import get_settings
from recipe_importer.app.services.storage.base import RecipeStore


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    monkeypatch.delenv("IMPORTER_ALLOW_PRIVATE_HOSTS", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeRecipeStore(RecipeStore):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved = []

    def save_recipe(self, recipe, author_id: str) -> str:
        if self.fail:
            raise RuntimeError("database unavailable")
        self.saved.append((recipe, author_id))
        return f"recipe-{len(self.saved)}"


@pytest.fixture
def recipe_store():
    return FakeRecipeStore()


def json_ld_page(*blocks, body: str = "") -> str:
    """Wrap JSON-LD payloads (dicts or raw strings) in a minimal HTML page."""
    scripts = []
    for block in blocks:
        payload = block if isinstance(block, str) else json.dumps(block)
        scripts.append(f'<script type="application/ld+json">{payload}</script>')
    return f"<html><head>{''.join(scripts)}</head><body>{body}</body></html>"


@pytest.fixture
def full_recipe():
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Chocolate Chip Cookies",
        "description": "Chewy cookies.",
        "image": ["https://example.com/a.jpg", "https://example.com/b.jpg"],
        "recipeIngredient": ["2 cups flour", "1 cup chocolate chips"],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Mix."},
            {"@type": "HowToStep", "text": "Bake."},
        ],
        "prepTime": "PT15M",
        "cookTime": "PT10M",
        "totalTime": "PT25M",
        "recipeYield": ["36", "36 cookies"],
        "keywords": "cookies, dessert",
        "recipeCategory": "Dessert",
    }


@pytest.fixture
def make_page():
    return json_ld_page


@pytest.fixture
def failing_recipe_store():
    return FakeRecipeStore(fail=True)
