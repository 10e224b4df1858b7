from abc import ABC, abstractmethod

from recipe_importer.app.services.url_parsing.models import CanonicalRecipe


class RecipeStore(ABC):
    @abstractmethod
    def save_recipe(self, recipe: CanonicalRecipe, author_id: str) -> str:  # pragma: no cover - interface
        """Persist an imported recipe and return its stored id."""
        raise NotImplementedError
