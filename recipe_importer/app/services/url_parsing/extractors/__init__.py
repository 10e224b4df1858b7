"""Recipe extractors for pages without usable JSON-LD."""

from recipe_importer.app.services.url_parsing.extractors.heuristic import (
    HEURISTIC_WARNING,
    extract_recipe_heuristic,
)
from recipe_importer.app.services.url_parsing.extractors.microdata import (
    extract_microdata_recipe,
)

__all__ = [
    "HEURISTIC_WARNING",
    "extract_microdata_recipe",
    "extract_recipe_heuristic",
]
