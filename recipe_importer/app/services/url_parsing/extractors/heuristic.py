"""Heuristic recipe extraction from HTML structure.

Used only when a page carries no structured recipe data. The result is a
partial recipe at best and always carries the fallback warning.
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from bs4 import BeautifulSoup

from recipe_importer.app.core.config import get_settings
from recipe_importer.app.services.url_parsing.models import (
    PLACEHOLDER_TITLE,
    CanonicalRecipe,
    RawDocument,
)
from recipe_importer.app.services.url_parsing.normalizer import (
    NO_INGREDIENTS,
    NO_INSTRUCTIONS,
    NO_TITLE,
    build_ingredients,
    build_instructions,
)
from recipe_importer.app.services.url_parsing.parsing_utils import (
    absolutize_url,
    clean_text,
    parse_servings_from_text,
    strip_site_name,
)

logger = logging.getLogger(__name__)

HEURISTIC_WARNING = "used fallback heuristic extraction; fields may be missing"

INGREDIENT_SELECTORS = [
    ".recipe-ingredient",
    ".ingredients li",
    ".recipe-ingredients li",
    '[class*="ingredient"] li',
    "li.ingredient",
]
INSTRUCTION_SELECTORS = [
    ".recipe-instruction",
    ".instructions li",
    ".recipe-instructions li",
    ".directions li",
    ".recipe-directions li",
    '[class*="instruction"] li',
    '[class*="direction"] li',
    "li.instruction",
]
HEADING_TAGS = ["h2", "h3", "h4", "h5", "h6", "strong", "b", "p", "span"]
INGREDIENT_HEADING_RE = re.compile(r"\bingredients?\b", re.I)
INSTRUCTION_HEADING_RE = re.compile(
    r"\b(directions?|instructions?|method|preparation|steps?|how\s+to\s+make)\b", re.I
)
QUANTITY_RE = re.compile(
    r"\d|[½¼¾⅓⅔⅛]|\b(cups?|tsp|tbsp|tablespoons?|teaspoons?|ounces?|oz|grams?|g|kg|ml|l|lbs?|pounds?|pinch|cloves?)\b",
    re.I,
)
ACTION_VERB_RE = re.compile(
    r"\b(cook|bake|add|mix|stir|heat|pour|season|chop|slice|dice|mince|preheat|combine|whisk|serve)\b",
    re.I,
)


def clean_soup_for_content(soup: BeautifulSoup) -> None:
    """Remove obvious boilerplate nodes before extracting candidate content."""
    for noisy in soup.find_all(["header", "footer", "nav", "aside", "form"]):
        noisy.decompose()
    for tag in soup.find_all(["script", "style", "noscript", "template"]):
        tag.decompose()


def find_main_node(soup: BeautifulSoup):
    """Find the main content node in the soup."""
    return (
        soup.find(attrs={"itemtype": re.compile("Recipe", re.I)})
        or soup.find("article")
        or soup.find("main")
        or soup.body
        or soup
    )


def _meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return clean_text(tag["content"]) or None
    return None


def _find_title(soup: BeautifulSoup) -> Optional[str]:
    heading = soup.find("h1")
    if heading and clean_text(heading.get_text(" ")):
        return clean_text(heading.get_text(" "))
    og_title = _meta_content(soup, property="og:title")
    if og_title:
        return strip_site_name(og_title)
    if soup.title and clean_text(soup.title.get_text()):
        return strip_site_name(clean_text(soup.title.get_text()))
    return None


def _list_items(lst) -> List[str]:
    return [clean_text(li.get_text(" ", strip=True)) for li in lst.find_all("li")]


def _select_texts(container, selectors: List[str], min_len: int, max_len: int) -> List[str]:
    for selector in selectors:
        texts = [
            clean_text(el.get_text(" ", strip=True)) for el in container.select(selector)
        ]
        texts = [t for t in texts if min_len < len(t) < max_len]
        if texts:
            logger.debug("Selector %r matched %d items", selector, len(texts))
            return texts
    return []


def _find_heading(container, pattern: re.Pattern):
    for tag in container.find_all(HEADING_TAGS):
        text = clean_text(tag.get_text(" "))
        if not text or len(text) > 40:
            continue
        # body text elements only count when they read as a bare label
        if tag.name in {"p", "span"}:
            if pattern.fullmatch(text.rstrip(":").strip()):
                return tag
        elif pattern.search(text):
            return tag
    return None


def _texts_after_heading(heading) -> Tuple[List[str], Optional[object]]:
    sibling = heading.find_next_sibling(["ol", "ul", "div", "section", "p"])
    if sibling is not None:
        if sibling.name in {"ol", "ul"}:
            return _list_items(sibling), sibling
        if sibling.name in {"div", "section"}:
            lst = sibling.find(["ol", "ul"])
            if lst is not None:
                return _list_items(lst), lst
            paragraphs = [clean_text(p.get_text(" ", strip=True)) for p in sibling.find_all("p")]
            if paragraphs:
                return paragraphs, sibling
        if sibling.name == "p":
            paragraphs = [clean_text(sibling.get_text(" ", strip=True))]
            for nxt in sibling.find_next_siblings():
                if nxt.name != "p":
                    break
                paragraphs.append(clean_text(nxt.get_text(" ", strip=True)))
            return paragraphs, sibling
    lst = heading.find_next(["ol", "ul"])
    if lst is not None:
        return _list_items(lst), lst
    return [], None


def _find_ingredient_items(container) -> Tuple[List[str], Optional[object]]:
    """Find likely ingredient items and the list element they came from."""
    heading = _find_heading(container, INGREDIENT_HEADING_RE)
    if heading is not None:
        items, source = _texts_after_heading(heading)
        if items:
            return items, source

    best_items: List[str] = []
    best_list = None
    best_score = -1
    for lst in container.find_all(["ul", "ol"]):
        items = _list_items(lst)
        if len(items) < 2:
            continue
        matches = sum(1 for item in items if QUANTITY_RE.search(item))
        if matches < max(2, len(items) // 2):
            continue
        score = matches * 2 + len(items) - sum(1 for i in items if ACTION_VERB_RE.search(i))
        if score > best_score:
            best_score = score
            best_items = items
            best_list = lst
    return best_items, best_list


def _find_instruction_items(container, exclude=None) -> List[str]:
    """Find likely instruction steps, skipping the list already used for ingredients."""
    heading = _find_heading(container, INSTRUCTION_HEADING_RE)
    if heading is not None:
        steps, source = _texts_after_heading(heading)
        if steps and source is not exclude:
            return steps

    ordered_lists = [ol for ol in container.find_all("ol") if ol is not exclude]
    best_list = None
    best_score = 0
    for ol in ordered_lists:
        items = _list_items(ol)
        score = len(items) + 2 * sum(1 for item in items if ACTION_VERB_RE.search(item))
        if score > best_score:
            best_score = score
            best_list = ol
    if best_list is not None:
        return _list_items(best_list)
    return []


def _extract(
    soup: BeautifulSoup, source_url: Optional[str], max_items: int
) -> Tuple[CanonicalRecipe, List[str]]:
    warnings: List[str] = [HEURISTIC_WARNING]

    title = _find_title(soup)
    description = _meta_content(soup, name="description") or _meta_content(
        soup, property="og:description"
    )
    image_url = None
    og_image = _meta_content(soup, property="og:image")
    if og_image:
        image_url = absolutize_url(og_image, source_url)

    clean_soup_for_content(soup)
    container = find_main_node(soup)

    ingredients = _select_texts(container, INGREDIENT_SELECTORS, 1, 200)
    ingredient_list = None
    if not ingredients:
        ingredients, ingredient_list = _find_ingredient_items(container)
    steps = _select_texts(container, INSTRUCTION_SELECTORS, 3, 2000)
    if not steps:
        steps = _find_instruction_items(container, exclude=ingredient_list)

    ingredients = [i for i in ingredients if i][:max_items]
    steps = [s for s in steps if s][:max_items]
    servings = parse_servings_from_text(container.get_text(" ", strip=True))

    if not title:
        warnings.append(NO_TITLE)
    if not ingredients:
        warnings.append(NO_INGREDIENTS)
    if not steps:
        warnings.append(NO_INSTRUCTIONS)

    recipe = CanonicalRecipe(
        title=title or PLACEHOLDER_TITLE,
        description=description,
        source_url=source_url,
        image_url=image_url,
        servings=servings,
        ingredients=build_ingredients(ingredients),
        instructions=build_instructions(steps),
    )
    return recipe, warnings


def extract_recipe_heuristic(
    document: Union[RawDocument, str],
    source_url: Optional[str] = None,
    max_items: Optional[int] = None,
) -> Tuple[CanonicalRecipe, List[str]]:
    """Extract a partial recipe using heuristic HTML analysis. Never raises."""
    if isinstance(document, RawDocument):
        html = document.html
        source_url = source_url or document.base_url
    else:
        html = document or ""
    if max_items is None:
        max_items = get_settings().heuristic_max_items

    try:
        soup = BeautifulSoup(html, "lxml")
        recipe, warnings = _extract(soup, source_url, max_items)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Heuristic extraction failed for %s", source_url)
        recipe = CanonicalRecipe(source_url=source_url)
        warnings = [HEURISTIC_WARNING, f"heuristic extraction failed: {exc}"]

    logger.info(
        "Heuristic recipe %r: ingredients=%d, steps=%d",
        recipe.title[:50],
        len(recipe.ingredients),
        len(recipe.instructions),
    )
    return recipe, warnings
