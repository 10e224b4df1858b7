import logging
from typing import Awaitable, Callable, List, Optional

from recipe_importer.app.core.config import get_settings
from recipe_importer.app.services.url_parsing.assembler import assemble_result
from recipe_importer.app.services.url_parsing.errors import (
    FetchError,
    FetchErrorKind,
    InvalidUrlError,
)
from recipe_importer.app.services.url_parsing.extractors import (
    extract_microdata_recipe,
    extract_recipe_heuristic,
)
from recipe_importer.app.services.url_parsing.graph_resolver import resolve_recipe
from recipe_importer.app.services.url_parsing.html_fetcher import fetch_document
from recipe_importer.app.services.url_parsing.models import (
    ExtractionMethod,
    ImportErrorCode,
    ImportResult,
    RawDocument,
)
from recipe_importer.app.services.url_parsing.normalizer import normalize_recipe
from recipe_importer.app.services.url_parsing.structured_data import locate_candidates

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[RawDocument]]

EMPTY_STRUCTURED_WARNING = "{method} recipe had no ingredients or instructions"

FETCH_ERROR_CODES = {
    FetchErrorKind.TIMEOUT: ImportErrorCode.FETCH_TIMEOUT,
    FetchErrorKind.NETWORK_ERROR: ImportErrorCode.NETWORK_ERROR,
    FetchErrorKind.HTTP_ERROR: ImportErrorCode.HTTP_ERROR,
    FetchErrorKind.UNSUPPORTED_CONTENT_TYPE: ImportErrorCode.UNSUPPORTED_CONTENT_TYPE,
}


def import_recipe_from_html(html: str, url: Optional[str] = None) -> ImportResult:
    """Run the extraction pipeline over an already fetched page.

    JSON-LD first, then microdata, then the heuristic scan. The same input
    always produces the same result.
    """
    max_minutes = get_settings().max_duration_minutes
    warnings: List[str] = []

    candidates, locate_warnings = locate_candidates(html)
    warnings.extend(locate_warnings)

    selected = resolve_recipe(candidates)
    if selected is not None:
        recipe, field_warnings = normalize_recipe(
            selected, source_url=url, max_duration_minutes=max_minutes
        )
        if recipe.has_content:
            return assemble_result(recipe, ExtractionMethod.JSON_LD, warnings + field_warnings)
        warnings.append(EMPTY_STRUCTURED_WARNING.format(method="JSON-LD"))

    microdata = extract_microdata_recipe(html)
    if microdata is not None:
        recipe, field_warnings = normalize_recipe(
            microdata, source_url=url, max_duration_minutes=max_minutes
        )
        if recipe.has_content:
            return assemble_result(recipe, ExtractionMethod.MICRODATA, warnings + field_warnings)
        warnings.append(EMPTY_STRUCTURED_WARNING.format(method="microdata"))

    recipe, heuristic_warnings = extract_recipe_heuristic(html, source_url=url)
    return assemble_result(recipe, ExtractionMethod.HEURISTIC, warnings + heuristic_warnings)


async def import_recipe_from_url(url: str, fetcher: Optional[Fetcher] = None) -> ImportResult:
    """Fetch ``url`` and extract a recipe. Fetch and URL errors come back as failed results."""
    fetcher = fetcher or fetch_document
    try:
        document = await fetcher(url)
    except InvalidUrlError as exc:
        logger.info("Rejected import URL %r: %s", url, exc)
        return ImportResult(
            success=False,
            error_code=ImportErrorCode.INVALID_URL,
            error_message=str(exc),
        )
    except FetchError as exc:
        logger.warning("Failed to fetch %s (%s)", url, exc.kind.value)
        return ImportResult(
            success=False,
            error_code=FETCH_ERROR_CODES[exc.kind],
            error_message=exc.message,
            status_code=exc.status_code,
        )

    return import_recipe_from_html(document.html, document.base_url)
