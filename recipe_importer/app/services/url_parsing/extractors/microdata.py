"""Schema.org microdata recipe extraction."""

import logging
import re
from typing import Any, Dict, List, Optional, Union

from bs4 import BeautifulSoup

from recipe_importer.app.services.url_parsing.models import RawDocument
from recipe_importer.app.services.url_parsing.parsing_utils import clean_text

logger = logging.getLogger(__name__)

RECIPE_ITEMTYPE_RE = re.compile(r"schema\.org/Recipe\b", re.I)


def _itemprop_re(name: str) -> re.Pattern:
    # itemprop may hold several space separated names
    return re.compile(rf"(^|\s){re.escape(name)}(\s|$)")


def _belongs_to(el, root) -> bool:
    for parent in el.parents:
        if parent is root:
            return True
        if parent.has_attr("itemscope"):
            return False
    return False


def _own_props(root, name: str) -> List[Any]:
    """Elements carrying ``itemprop=name`` that belong to ``root`` rather than a nested item."""
    return [
        el
        for el in root.find_all(attrs={"itemprop": _itemprop_re(name)})
        if _belongs_to(el, root)
    ]


def _prop_value(el) -> str:
    """Microdata property value, following the attribute each element type uses."""
    if el.name == "meta":
        return el.get("content") or ""
    if el.name in {"img", "audio", "video", "source", "embed", "iframe"}:
        return el.get("src") or el.get("content") or ""
    if el.name in {"a", "link", "area"}:
        return el.get("href") or el.get("content") or ""
    if el.name == "time":
        return el.get("datetime") or el.get("content") or el.get_text(" ", strip=True)
    if el.name in {"data", "meter"}:
        return el.get("value") or el.get_text(" ", strip=True)
    return el.get("content") or el.get_text(" ", strip=True)


def _first_value(root, name: str) -> Optional[str]:
    for el in _own_props(root, name):
        value = clean_text(_prop_value(el))
        if value:
            return value
    return None


def _instruction_texts(root) -> List[str]:
    steps: List[str] = []
    for el in _own_props(root, "recipeInstructions"):
        if el.has_attr("itemscope"):
            text_props = _own_props(el, "text") or _own_props(el, "name")
            source = text_props[0] if text_props else el
            steps.append(source.get_text(" ", strip=True))
            continue
        items = el.find_all("li")
        if items:
            steps.extend(li.get_text(" ", strip=True) for li in items)
        else:
            steps.append(_prop_value(el))
    return [clean_text(s) for s in steps if clean_text(s)]


def extract_microdata_recipe(document: Union[RawDocument, str]) -> Optional[Dict[str, Any]]:
    """Read the first microdata Recipe into the same shape JSON-LD recipes have."""
    html = document.html if isinstance(document, RawDocument) else (document or "")
    soup = BeautifulSoup(html, "lxml")
    root = soup.find(attrs={"itemtype": RECIPE_ITEMTYPE_RE})
    if root is None:
        return None
    logger.info("Found microdata Recipe on <%s>", root.name)

    data: Dict[str, Any] = {"@type": "Recipe"}
    for key in ("name", "description", "prepTime", "cookTime", "totalTime", "recipeYield", "image"):
        value = _first_value(root, key)
        if value:
            data[key] = value
    if "name" not in data:
        heading = soup.find("h1")
        if heading and clean_text(heading.get_text()):
            data["name"] = clean_text(heading.get_text())

    # "ingredients" is the superseded schema.org name still used by older sites
    ingredient_els = _own_props(root, "recipeIngredient") or _own_props(root, "ingredients")
    ingredients = [_prop_value(el) for el in ingredient_els]
    data["recipeIngredient"] = [text for text in ingredients if clean_text(text)]
    data["recipeInstructions"] = _instruction_texts(root)

    keywords = _first_value(root, "keywords")
    if keywords:
        data["keywords"] = keywords
    categories = [clean_text(_prop_value(el)) for el in _own_props(root, "recipeCategory")]
    if any(categories):
        data["recipeCategory"] = [c for c in categories if c]

    logger.info(
        "Microdata recipe: ingredients=%d, steps=%d",
        len(data["recipeIngredient"]),
        len(data["recipeInstructions"]),
    )
    return data
