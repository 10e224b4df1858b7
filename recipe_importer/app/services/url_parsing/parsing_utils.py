"""General parsing utilities for recipe extraction.

Every helper here accepts the untyped values found in upstream structured
data and returns ``(value, warning)`` pairs or plain values; none of them
raise on unexpected shapes.
"""

import html
import re
from numbers import Number
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlparse

# digit runs are capped so int() never sees an oversized literal
ISO_DURATION_RE = re.compile(r"^PT(?=\d)(?:(\d{1,9})H)?(?:(\d{1,9})M)?$", re.I)
INTEGER_RE = re.compile(r"(?<!\d)\d{1,9}(?!\d)")
TAG_RE = re.compile(r"<[^>]+>")

SERVINGS_TEXT_PATTERNS = [
    r"serves\s+(\d{1,9})(?!\d)",
    r"serve[s]?:\s*(\d{1,9})(?!\d)",
    r"servings?:\s*(\d{1,9})(?!\d)",
    r"yield[s]?:\s*(\d{1,9})(?!\d)",
    r"makes\s+(\d{1,9})(?!\d)",
]


def clean_text(text: str) -> str:
    """Normalize whitespace and HTML entities in text."""
    return re.sub(r"\s+", " ", html.unescape(text or "")).strip()


def strip_html(text: str) -> str:
    """Drop inline markup some sites leave inside JSON-LD strings."""
    return clean_text(TAG_RE.sub(" ", text or ""))


def parse_iso8601_duration(
    value, max_minutes: Optional[int] = None
) -> Tuple[Optional[int], Optional[str]]:
    """Parse ``PT#H#M`` into minutes.

    Hour-only and minute-only forms are accepted. Anything else, including
    day components such as ``P1D``, is rejected with a warning. Values above
    ``max_minutes`` are rejected, not clamped.
    """
    if not isinstance(value, str):
        return None, f"unsupported duration value {value!r}"
    match = ISO_DURATION_RE.match(value.strip())
    if not match or not (match.group(1) or match.group(2)):
        return None, f"unrecognized duration {value!r}"
    minutes = int(match.group(1) or 0) * 60 + int(match.group(2) or 0)
    if max_minutes is not None and minutes > max_minutes:
        return None, f"duration {value!r} exceeds {max_minutes} minutes"
    return minutes, None


def _first_positive_int(text: str) -> Optional[int]:
    for match in INTEGER_RE.finditer(text):
        number = int(match.group())
        if number > 0:
            return number
    return None


def parse_servings(value) -> Optional[int]:
    """Take the first positive integer from a yield value (string, number, list or object)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Number):
        try:
            number = int(value)
        except (OverflowError, ValueError):
            return None
        return number if number > 0 else None
    if isinstance(value, str):
        return _first_positive_int(value)
    if isinstance(value, dict):
        # schema.org QuantitativeValue
        return parse_servings(value.get("value"))
    if isinstance(value, list):
        for item in value:
            servings = parse_servings(item)
            if servings is not None:
                return servings
    return None


def parse_servings_from_text(text: str) -> Optional[int]:
    """Extract servings from descriptive text."""
    if not text:
        return None
    lowered = text.lower()
    for pat in SERVINGS_TEXT_PATTERNS:
        m = re.search(pat, lowered)
        if m:
            servings = int(m.group(1))
            if servings > 0:
                return servings
    return None


def absolutize_url(value: str, base_url: Optional[str]) -> Optional[str]:
    """Resolve ``value`` against ``base_url``; return None if the result is not http(s)."""
    candidate = (value or "").strip()
    if not candidate:
        return None
    if base_url:
        candidate = urljoin(base_url, candidate)
    parsed = urlparse(candidate)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        return None
    return candidate


def extract_image(value, base_url: Optional[str] = None) -> Optional[str]:
    """Extract an image URL from a string, an ImageObject, or a list of either."""
    if isinstance(value, str):
        return absolutize_url(value, base_url)
    if isinstance(value, dict):
        for key in ("url", "contentUrl", "@id"):
            found = extract_image(value.get(key), base_url)
            if found:
                return found
        return None
    if isinstance(value, list):
        for item in value:
            found = extract_image(item, base_url)
            if found:
                return found
    return None


def split_keywords(value) -> List[str]:
    """Split comma separated keyword strings (or lists of them) into tags."""
    if not value:
        return []
    if isinstance(value, str):
        return [clean_text(kw) for kw in value.split(",") if clean_text(kw)]
    tags: List[str] = []
    if isinstance(value, Sequence):
        for item in value:
            if isinstance(item, str):
                tags.extend(split_keywords(item))
    return tags


def dedupe_preserving_order(values: Sequence[str]) -> List[str]:
    seen = set()
    unique = []
    for value in values:
        key = value.lower()
        if key not in seen:
            seen.add(key)
            unique.append(value)
    return unique


def strip_site_name(title: str) -> str:
    """Drop a trailing ``| Site`` or `` - Site`` suffix from a page title."""
    for sep in (" | ", " - ", " – ", " — "):
        if sep in title:
            head = title.split(sep)[0].strip()
            if head:
                return head
    return title
