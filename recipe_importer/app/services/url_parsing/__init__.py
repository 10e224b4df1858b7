"""URL recipe import package.

This package extracts recipes from web pages using, in order, schema.org
JSON-LD, schema.org microdata, and a heuristic HTML scan, and normalizes
them into the canonical recipe model.
"""

from recipe_importer.app.services.url_parsing.assembler import (
    assemble_result,
    score_confidence,
)
from recipe_importer.app.services.url_parsing.errors import (
    FetchError,
    FetchErrorKind,
    InvalidUrlError,
    RecipeImportError,
)
from recipe_importer.app.services.url_parsing.graph_resolver import (
    is_recipe_type,
    resolve_recipe,
)
from recipe_importer.app.services.url_parsing.html_fetcher import (
    fetch_document,
    is_private_host,
    validate_url,
)
from recipe_importer.app.services.url_parsing.models import (
    CanonicalRecipe,
    Confidence,
    ExtractionMethod,
    ImportErrorCode,
    ImportResult,
    Ingredient,
    Instruction,
    RawDocument,
    StructuredCandidate,
)
from recipe_importer.app.services.url_parsing.normalizer import normalize_recipe
from recipe_importer.app.services.url_parsing.parsing_utils import (
    clean_text,
    extract_image,
    parse_iso8601_duration,
    parse_servings,
    parse_servings_from_text,
)
from recipe_importer.app.services.url_parsing.structured_data import locate_candidates

__all__ = [
    # Models
    "CanonicalRecipe",
    "Confidence",
    "ExtractionMethod",
    "ImportErrorCode",
    "ImportResult",
    "Ingredient",
    "Instruction",
    "RawDocument",
    "StructuredCandidate",
    # Errors
    "FetchError",
    "FetchErrorKind",
    "InvalidUrlError",
    "RecipeImportError",
    # Pipeline stages
    "fetch_document",
    "is_private_host",
    "validate_url",
    "locate_candidates",
    "is_recipe_type",
    "resolve_recipe",
    "normalize_recipe",
    "assemble_result",
    "score_confidence",
    # Parsing utilities
    "clean_text",
    "extract_image",
    "parse_iso8601_duration",
    "parse_servings",
    "parse_servings_from_text",
]
