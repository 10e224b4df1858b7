"""HTML fetching and URL validation utilities."""

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx

from recipe_importer.app.core.config import Settings, get_settings
from recipe_importer.app.services.url_parsing.errors import (
    FetchError,
    FetchErrorKind,
    InvalidUrlError,
)
from recipe_importer.app.services.url_parsing.models import RawDocument

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = ("text/html", "application/xhtml", "text/plain")
META_CHARSET_RE = re.compile(r'<meta[^>]+charset=["\']?([^"\'>\s;]+)', re.I)


def is_private_host(host: str) -> bool:
    """Check if a host is private/localhost."""
    hostname = host.strip("[]")
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        hostname = hostname.split(":")[0]
        try:
            ip = ipaddress.ip_address(hostname)
        except ValueError:
            return hostname.lower() in {"localhost"}
    return ip.is_private or ip.is_loopback


def validate_url(url: str, allow_private_hosts: bool = False) -> str:
    """Return the stripped URL or raise InvalidUrlError."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError("URL is required.")
    url = url.strip()
    try:
        parsed = urlparse(url)
        # Accessing .port validates the netloc as a side effect.
        parsed.port
    except ValueError as exc:
        raise InvalidUrlError(f"Malformed URL: {exc}") from exc
    if parsed.scheme.lower() not in {"http", "https"}:
        raise InvalidUrlError("URL must start with http or https.")
    if not parsed.netloc or not parsed.hostname:
        raise InvalidUrlError("URL must include a host.")
    if not allow_private_hosts and is_private_host(parsed.hostname):
        raise InvalidUrlError("Host is blocked (localhost/private).")
    return url


def _charset_from_content_type(content_type: str) -> Optional[str]:
    if "charset=" not in content_type.lower():
        return None
    try:
        raw = content_type.lower().split("charset=")[1].split(";")[0]
    except IndexError:
        return None
    return raw.strip().strip("\"'") or None


def decode_body(content: bytes, content_type: str) -> str:
    """Decode a response body using the header charset, then <meta charset>, then UTF-8."""
    encoding = _charset_from_content_type(content_type)
    if encoding:
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug("Declared charset %s failed; falling back", encoding)

    text = content.decode("utf-8", errors="replace")
    match = META_CHARSET_RE.search(text[:4096])
    if match:
        detected = match.group(1).lower()
        if detected not in {"utf-8", "utf8"}:
            try:
                return content.decode(detected)
            except (UnicodeDecodeError, LookupError):
                pass
    return text


async def fetch_document(
    url: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    settings: Optional[Settings] = None,
) -> RawDocument:
    """Fetch a page once. Raises InvalidUrlError or FetchError, never retries."""
    settings = settings or get_settings()
    url = validate_url(url, allow_private_hosts=settings.allow_private_hosts)

    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }
    timeout = httpx.Timeout(
        settings.fetch_timeout_seconds, connect=settings.connect_timeout_seconds
    )

    try:
        async with httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, headers=headers, transport=transport
        ) as client:
            response = await client.get(url)
    except httpx.InvalidURL as exc:
        raise InvalidUrlError(f"Malformed URL: {exc}") from exc
    except httpx.TimeoutException as exc:
        logger.warning("Timed out fetching %s: %s", url, exc)
        raise FetchError(
            FetchErrorKind.TIMEOUT, "Request timed out - the website took too long to respond."
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning("Network error fetching %s: %s", url, exc)
        raise FetchError(FetchErrorKind.NETWORK_ERROR, f"Network error: {exc}") from exc

    if not response.is_success:
        logger.warning("Fetching %s returned status %s", url, response.status_code)
        raise FetchError(
            FetchErrorKind.HTTP_ERROR,
            f"Site returned status {response.status_code}.",
            status_code=response.status_code,
        )

    content_type = response.headers.get("content-type", "")
    if content_type and not any(t in content_type.lower() for t in ACCEPTED_CONTENT_TYPES):
        raise FetchError(
            FetchErrorKind.UNSUPPORTED_CONTENT_TYPE,
            f"Unsupported content type: {content_type}",
            status_code=response.status_code,
        )

    html = decode_body(response.content, content_type)
    logger.info("Fetched %s (%d chars, status %s)", url, len(html), response.status_code)
    return RawDocument(
        url=url,
        final_url=str(response.url),
        status_code=response.status_code,
        content_type=content_type or None,
        html=html,
    )
