"""Map schema.org Recipe fields onto the canonical recipe.

Each field is normalized independently. A field that cannot be read adds a
warning and is left absent; it never aborts the rest of the recipe.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from recipe_importer.app.core.config import get_settings
from recipe_importer.app.services.url_parsing.models import (
    PLACEHOLDER_TITLE,
    CanonicalRecipe,
    Ingredient,
    Instruction,
    StructuredCandidate,
)
from recipe_importer.app.services.url_parsing.parsing_utils import (
    clean_text,
    dedupe_preserving_order,
    extract_image,
    parse_iso8601_duration,
    parse_servings,
    split_keywords,
    strip_html,
)

logger = logging.getLogger(__name__)

NO_INGREDIENTS = "no ingredients found"
NO_INSTRUCTIONS = "no instructions found"
NO_IMAGE = "no image found"
NO_TITLE = "no recipe title found"
NO_FIELDS = "no recipe fields extracted"

DURATION_FIELDS = (
    ("prepTime", "prep_time_minutes"),
    ("cookTime", "cook_time_minutes"),
    ("totalTime", "total_time_minutes"),
)
SECTION_TYPES = {"HowToSection", "ItemList"}


def build_ingredients(texts: List[str]) -> List[Ingredient]:
    """Wrap free-text lines as ingredients; amount and unit are left for later editing."""
    return [
        Ingredient(id=f"ingredient-{idx}", name=clean_text(text), raw_text=text)
        for idx, text in enumerate(texts)
    ]


def build_instructions(steps: List[str]) -> List[Instruction]:
    """Number steps 1..n in the given order."""
    return [
        Instruction(id=f"instruction-{idx}", step=idx + 1, content=content)
        for idx, content in enumerate(steps)
    ]


def normalize_ingredients(value) -> Tuple[List[Ingredient], List[str]]:
    warnings: List[str] = []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        if value is not None:
            warnings.append(f"unsupported recipeIngredient value of type {type(value).__name__}")
        warnings.append(NO_INGREDIENTS)
        return [], warnings

    texts: List[str] = []
    for idx, raw in enumerate(value):
        if not isinstance(raw, str):
            warnings.append(f"skipped non-text ingredient entry {idx}")
            continue
        if clean_text(raw):
            texts.append(raw)
    if not texts:
        warnings.append(NO_INGREDIENTS)
    logger.debug("Normalized %d of %d ingredient entries", len(texts), len(value))
    return build_ingredients(texts), warnings


def _is_section(entry: Dict[str, Any]) -> bool:
    type_tag = entry.get("@type")
    types = [type_tag] if isinstance(type_tag, str) else (type_tag or [])
    if any(t in SECTION_TYPES for t in types if isinstance(t, str)):
        return True
    return "itemListElement" in entry and not entry.get("text")


def _collect_steps(value, warnings: List[str], path: str = "") -> List[str]:
    steps: List[str] = []
    if isinstance(value, str):
        for line in value.splitlines():
            cleaned = strip_html(line)
            if cleaned:
                steps.append(cleaned)
        return steps
    if isinstance(value, dict):
        value = [value]
    if not isinstance(value, list):
        if value is not None:
            warnings.append(
                f"unsupported recipeInstructions value of type {type(value).__name__}"
            )
        return steps

    for idx, entry in enumerate(value):
        label = f"{path}{idx}"
        if isinstance(entry, str):
            cleaned = strip_html(entry)
            if cleaned:
                steps.append(cleaned)
        elif isinstance(entry, dict):
            if _is_section(entry):
                steps.extend(
                    _collect_steps(entry.get("itemListElement"), warnings, path=f"{label}.")
                )
                continue
            text = entry.get("text")
            if not isinstance(text, str) or not strip_html(text):
                text = entry.get("name")
            if isinstance(text, str) and strip_html(text):
                steps.append(strip_html(text))
            else:
                warnings.append(f"skipped instruction entry {label} without text")
        else:
            warnings.append(f"skipped unsupported instruction entry {label}")
    return steps


def normalize_instructions(value) -> Tuple[List[Instruction], List[str]]:
    warnings: List[str] = []
    steps = _collect_steps(value, warnings)
    if not steps:
        warnings.append(NO_INSTRUCTIONS)
    return build_instructions(steps), warnings


def normalize_durations(
    data: Dict[str, Any], max_minutes: int
) -> Tuple[Dict[str, int], List[str]]:
    durations: Dict[str, int] = {}
    warnings: List[str] = []
    for source_key, target_key in DURATION_FIELDS:
        raw = data.get(source_key)
        if raw is None or raw == "":
            continue
        minutes, problem = parse_iso8601_duration(raw, max_minutes=max_minutes)
        if problem:
            warnings.append(f"could not parse {source_key}: {problem}")
            continue
        durations[target_key] = minutes
    return durations, warnings


def normalize_tags(data: Dict[str, Any]) -> List[str]:
    tags: List[str] = []
    for key in ("keywords", "recipeCategory", "recipeCuisine"):
        tags.extend(split_keywords(data.get(key)))
    return dedupe_preserving_order(tags)


def _text_field(value) -> Optional[str]:
    if isinstance(value, list):
        value = next((v for v in value if isinstance(v, str) and v.strip()), None)
    if not isinstance(value, str):
        return None
    return strip_html(value) or None


def normalize_recipe(
    source: Union[StructuredCandidate, Dict[str, Any]],
    source_url: Optional[str] = None,
    max_duration_minutes: Optional[int] = None,
) -> Tuple[CanonicalRecipe, List[str]]:
    """Build a best-effort canonical recipe plus the warnings met along the way."""
    data = source.data if isinstance(source, StructuredCandidate) else (source or {})
    if max_duration_minutes is None:
        max_duration_minutes = get_settings().max_duration_minutes
    warnings: List[str] = []

    title = _text_field(data.get("name")) or _text_field(data.get("headline"))
    if not title:
        warnings.append(NO_TITLE)

    ingredients, ingredient_warnings = normalize_ingredients(data.get("recipeIngredient"))
    warnings.extend(ingredient_warnings)

    instructions, instruction_warnings = normalize_instructions(data.get("recipeInstructions"))
    warnings.extend(instruction_warnings)

    image_url = extract_image(data.get("image"), base_url=source_url)
    if not image_url:
        warnings.append(NO_IMAGE)

    durations, duration_warnings = normalize_durations(data, max_duration_minutes)
    warnings.extend(duration_warnings)

    raw_yield = data.get("recipeYield")
    servings = parse_servings(raw_yield)
    if servings is None and raw_yield not in (None, "", []):
        warnings.append(f"could not parse servings from recipeYield {raw_yield!r}")

    recipe = CanonicalRecipe(
        title=title or PLACEHOLDER_TITLE,
        description=_text_field(data.get("description")),
        source_url=source_url,
        image_url=image_url,
        tags=normalize_tags(data),
        servings=servings,
        ingredients=ingredients,
        instructions=instructions,
        **durations,
    )
    if not (title or ingredients or instructions or image_url or durations or servings):
        warnings.append(NO_FIELDS)

    logger.info(
        "Normalized recipe %r: ingredients=%d, steps=%d, warnings=%d",
        recipe.title[:50],
        len(ingredients),
        len(instructions),
        len(warnings),
    )
    return recipe, warnings
