"""Locate schema.org JSON-LD blocks embedded in HTML."""

import json
import logging
import re
from typing import List, Tuple, Union

from bs4 import BeautifulSoup

from recipe_importer.app.services.url_parsing.models import RawDocument, StructuredCandidate

logger = logging.getLogger(__name__)

JSON_LD_TYPE_RE = re.compile(r"^\s*application/ld\+json\s*(;.*)?$", re.I)


def _html_of(document: Union[RawDocument, str]) -> str:
    return document.html if isinstance(document, RawDocument) else (document or "")


def locate_candidates(
    document: Union[RawDocument, str],
) -> Tuple[List[StructuredCandidate], List[str]]:
    """Return every JSON-LD object on the page in document order.

    A block that fails to parse is skipped with a warning so that one bad
    script tag does not hide a good one elsewhere on the page.
    """
    soup = BeautifulSoup(_html_of(document), "lxml")
    scripts = soup.find_all("script", attrs={"type": JSON_LD_TYPE_RE})
    logger.info("Found %d JSON-LD script blocks", len(scripts))

    candidates: List[StructuredCandidate] = []
    warnings: List[str] = []
    for idx, script in enumerate(scripts):
        raw_json = (script.string or script.get_text() or "").strip()
        if not raw_json:
            logger.debug("JSON-LD block %d is empty", idx)
            continue
        # Some CMSes wrap the payload in an HTML comment or CDATA section.
        raw_json = re.sub(r"^(<!--|<!\[CDATA\[)|(-->|\]\]>)$", "", raw_json).strip()
        try:
            data = json.loads(raw_json)
        except (ValueError, RecursionError) as exc:
            # JSONDecodeError, oversized integer literals and runaway nesting
            logger.warning(
                "JSON-LD block %d failed to parse: %s (first 200 chars: %s)",
                idx,
                exc,
                raw_json[:200],
            )
            warnings.append(f"skipped malformed JSON-LD block {idx}")
            continue

        if isinstance(data, dict):
            candidates.append(StructuredCandidate.from_object(data, block_index=idx))
        elif isinstance(data, list):
            logger.info("JSON-LD block %d is a list with %d items", idx, len(data))
            for pos, item in enumerate(data):
                if isinstance(item, dict):
                    candidates.append(
                        StructuredCandidate.from_object(item, block_index=idx, graph_index=pos)
                    )
        else:
            logger.debug("JSON-LD block %d is a bare %s, ignoring", idx, type(data).__name__)

    return candidates, warnings
