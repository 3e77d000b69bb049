"""Page fetching and URL validation utilities.

Every failure is reported as a FetchResult with an error code; nothing here
raises to the caller.
"""

import ipaddress
import json
import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx

from recipe_keeper.app.core.config import get_settings
from recipe_keeper.app.services.url_parsing.models import FetchResult, FetchStatus, RawPayload

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml")
PARTIAL_CONTENT_TYPES = ("text/plain",)

_META_CHARSET_RE = re.compile(r'<meta[^>]+charset=["\']?([^"\'>\s;]+)', re.I)
_HTML_TAG_RE = re.compile(r"<[a-z!][^>]*>", re.I)


def is_private_host(hostname: str) -> bool:
    """Check if a hostname (as given by urlparse, no port) is private/localhost."""
    hostname = hostname.strip("[]")
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return hostname.lower() in {"localhost"}
    mapped = getattr(ip, "ipv4_mapped", None)
    if mapped is not None:
        ip = mapped
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_unspecified


def _failure(error_code: str, message: str) -> FetchResult:
    return FetchResult(success=False, error=message, error_code=error_code)


def validate_url(url: Optional[str]) -> Optional[FetchResult]:
    """Failure result for a URL that must not be fetched, None when it is fine."""
    try:
        parsed = urlparse(url or "")
    except ValueError:
        return _failure("invalid_url", "URL could not be parsed.")
    if parsed.scheme not in {"http", "https"}:
        return _failure("invalid_url", "URL must start with http or https.")
    if not parsed.netloc or is_private_host(parsed.hostname or ""):
        return _failure("invalid_url", "Host is blocked (localhost/private).")
    return None


def build_headers() -> dict:
    settings = get_settings()
    headers = {
        "User-Agent": settings.scraper_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9,he;q=0.8",
        "Referer": "https://www.google.com/",
        "Connection": "keep-alive",
    }
    return headers


def load_cookies() -> dict:
    settings = get_settings()
    if not settings.scraper_cookies:
        return {}
    try:
        cookies = json.loads(settings.scraper_cookies)
    except json.JSONDecodeError:
        logger.warning("SCRAPER_COOKIES is not valid JSON; ignoring it")
        return {}
    return cookies if isinstance(cookies, dict) else {}


def _charset(content_type: str) -> Optional[str]:
    if "charset=" not in content_type.lower():
        return None
    try:
        return content_type.lower().split("charset=")[1].split(";")[0].strip().strip("\"'")
    except (IndexError, AttributeError):
        return None


def decode_markup(content: bytes, content_type: str) -> str:
    """Decode a response body: declared charset, then UTF-8, then the meta charset."""
    encoding = _charset(content_type) or "utf-8"
    try:
        return content.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        pass
    text = content.decode("utf-8", errors="replace")
    match = _META_CHARSET_RE.search(text)
    if match and match.group(1).lower() not in {"utf-8", encoding}:
        try:
            return content.decode(match.group(1))
        except (UnicodeDecodeError, LookupError):
            pass
    return text


def looks_like_markup(text: str) -> bool:
    """Heuristic check that decoded text is markup and not binary noise."""
    sample = text[:2000]
    if not sample:
        return False
    control_chars = sum(1 for c in sample if ord(c) < 32 and c not in "\n\r\t")
    return bool(_HTML_TAG_RE.search(sample)) and control_chars / len(sample) < 0.1


async def _fetch_direct(url: str, timeout: httpx.Timeout, transport=None) -> FetchResult:
    async with httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers=build_headers(),
        cookies=load_cookies(),
        transport=transport,
    ) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException:
            return _failure("fetch_timeout", "Timed out fetching the page.")
        except httpx.HTTPStatusError as exc:
            return _failure("fetch_failed", f"Site returned status {exc.response.status_code}.")
        except httpx.HTTPError as exc:
            return _failure("fetch_failed", f"Network error: {exc}")

    content_type = response.headers.get("content-type", "")
    lowered = content_type.lower()
    if any(kind in lowered for kind in HTML_CONTENT_TYPES):
        status = FetchStatus.OK
    elif not lowered or any(kind in lowered for kind in PARTIAL_CONTENT_TYPES):
        status = FetchStatus.PARTIAL
    else:
        return _failure("unsupported_content_type", f"Unsupported content type: {content_type}")

    text = decode_markup(response.content, content_type)
    if not looks_like_markup(text):
        logger.warning("Could not decode markup for %s (content-type=%s)", url, content_type)
        return _failure("encoding_error", "Unable to decode page content.")

    payload = RawPayload(source_url=url, markup=text, status=status, content_type=content_type or None)
    return FetchResult(success=True, data=payload)


async def _fetch_rendered(url: str, timeout: httpx.Timeout, transport=None) -> FetchResult:
    """Fetch through the Firecrawl scrape API, which renders JavaScript."""
    settings = get_settings()
    endpoint = f"{settings.firecrawl_base_url.rstrip('/')}/v1/scrape"
    headers = {"Authorization": f"Bearer {settings.firecrawl_api_key}"}
    async with httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport) as client:
        try:
            response = await client.post(endpoint, json={"url": url, "formats": ["html"]})
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException:
            return _failure("fetch_timeout", "Timed out waiting for the rendering service.")
        except httpx.HTTPStatusError as exc:
            return _failure("fetch_failed", f"Rendering service returned status {exc.response.status_code}.")
        except httpx.HTTPError as exc:
            return _failure("fetch_failed", f"Network error: {exc}")
        except ValueError:
            return _failure("fetch_failed", "Rendering service returned invalid JSON.")

    if not isinstance(body, dict) or not body.get("success"):
        error = body.get("error") if isinstance(body, dict) else None
        return _failure("fetch_failed", error or "Rendering service could not scrape the page.")
    data = body.get("data") or {}
    markup = data.get("html") or data.get("rawHtml") or ""
    if not markup:
        return _failure("fetch_failed", "Rendering service returned no HTML.")
    payload = RawPayload(source_url=url, markup=markup, status=FetchStatus.OK, content_type="text/html")
    return FetchResult(success=True, data=payload)


async def fetch_page(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> FetchResult:
    """Fetch a page for parsing.

    Uses the rendering service when FIRECRAWL_API_KEY is configured and plain
    HTTP otherwise. ``transport`` is handed to httpx, mostly for tests.
    """
    invalid = validate_url(url)
    if invalid is not None:
        logger.info("Rejected URL %s: %s", url, invalid.error)
        return invalid

    settings = get_settings()
    timeout = httpx.Timeout(settings.fetch_timeout_seconds, connect=5.0)
    if settings.firecrawl_api_key:
        result = await _fetch_rendered(url, timeout, transport)
    else:
        result = await _fetch_direct(url, timeout, transport)

    if result.success:
        logger.info("Fetched %s (%d chars, status=%s)", url, len(result.data.markup), result.data.status.value)
    else:
        logger.warning("Fetch failed for %s: %s (%s)", url, result.error, result.error_code)
    return result
