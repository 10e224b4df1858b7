"""Confidence scoring and final result assembly."""

import logging
from typing import List, Sequence

from recipe_importer.app.services.url_parsing.models import (
    CanonicalRecipe,
    Confidence,
    ExtractionMethod,
    ImportErrorCode,
    ImportResult,
)

logger = logging.getLogger(__name__)


def score_confidence(method: ExtractionMethod, recipe: CanonicalRecipe) -> Confidence:
    if not method.is_structured:
        return Confidence.LOW
    if recipe.ingredients and recipe.instructions:
        return Confidence.HIGH
    return Confidence.MEDIUM


def _dedupe(warnings: Sequence[str]) -> List[str]:
    seen = set()
    unique = []
    for warning in warnings:
        if warning not in seen:
            seen.add(warning)
            unique.append(warning)
    return unique


def assemble_result(
    recipe: CanonicalRecipe, method: ExtractionMethod, warnings: Sequence[str]
) -> ImportResult:
    """Turn a normalized recipe into the caller-facing result.

    A recipe with neither ingredients nor instructions is reported as a
    failure rather than an empty success.
    """
    warnings = _dedupe(warnings)
    if not recipe.has_content:
        logger.info("No ingredients or instructions recovered (method=%s)", method.value)
        return ImportResult(
            success=False,
            method=method,
            warnings=warnings,
            error_code=ImportErrorCode.NO_RECIPE_DATA_FOUND,
            error_message="No recipe data found on this page.",
        )
    confidence = score_confidence(method, recipe)
    logger.info(
        "Assembled recipe %r (method=%s, confidence=%s)",
        recipe.title[:50],
        method.value,
        confidence.value,
    )
    return ImportResult(
        success=True,
        recipe=recipe,
        confidence=confidence,
        method=method,
        warnings=warnings,
    )
