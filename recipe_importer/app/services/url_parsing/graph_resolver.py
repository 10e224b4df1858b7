"""Pick the recipe out of the JSON-LD candidates found on a page."""

import logging
from typing import Any, Optional, Sequence

from recipe_importer.app.services.url_parsing.models import StructuredCandidate

logger = logging.getLogger(__name__)

RECIPE_TYPE = "Recipe"
# Upstream vocabulary nests one level; deeper graphs are tolerated, not expected.
MAX_GRAPH_DEPTH = 3


def is_recipe_type(type_tag: Any) -> bool:
    """True for ``"Recipe"`` or a list of roles containing ``"Recipe"`` (case-sensitive)."""
    if isinstance(type_tag, str):
        return type_tag == RECIPE_TYPE
    if isinstance(type_tag, list):
        return any(isinstance(t, str) and t == RECIPE_TYPE for t in type_tag)
    return False


def _search_graph(
    node: Any, block_index: int, depth: int = 0
) -> Optional[StructuredCandidate]:
    if depth >= MAX_GRAPH_DEPTH or not isinstance(node, dict):
        return None
    graph = node.get("@graph")
    if not isinstance(graph, list):
        return None
    for pos, item in enumerate(graph):
        if not isinstance(item, dict):
            continue
        if is_recipe_type(item.get("@type")):
            logger.info("Found Recipe at @graph position %d of block %d", pos, block_index)
            return StructuredCandidate.from_object(item, block_index=block_index, graph_index=pos)
    for item in graph:
        nested = _search_graph(item, block_index, depth + 1)
        if nested is not None:
            return nested
    return None


def resolve_recipe(candidates: Sequence[StructuredCandidate]) -> Optional[StructuredCandidate]:
    """Return the first Recipe candidate in document order, or None.

    The first match wins even if a later candidate is more complete.
    """
    for candidate in candidates:
        if is_recipe_type(candidate.type_tag):
            logger.info("Block %d is a Recipe", candidate.block_index)
            return candidate
        found = _search_graph(candidate.data, candidate.block_index)
        if found is not None:
            return found
    logger.info("No Recipe among %d JSON-LD candidates", len(candidates))
    return None
