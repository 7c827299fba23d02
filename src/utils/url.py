import re
from urllib.parse import urlparse, urlunparse

from src.config.constants import MAX_BATCH_URLS
from src.utils.errors import InvalidUrlError

_URL_IN_TEXT = re.compile(r"https?://[^\s\"'<>]+")
_BARE_DOMAIN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-]*\.[a-zA-Z]{2,}")
_HAS_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def ensure_scheme(url: str, default_scheme: str = "https") -> str:
    """Ensure a URL has a scheme prefix."""
    if not url.lower().startswith(("http://", "https://")):
        return f"{default_scheme}://{url}"
    return url


def normalize_target_url(url: str) -> str:
    """Trim, add a scheme if missing, and lowercase scheme/host.

    Raises InvalidUrlError when the result is not an absolute http(s) URL.
    """
    if not url or not url.strip():
        raise InvalidUrlError("Please enter a URL", url=url or "")

    stripped = url.strip()
    candidate = stripped if _HAS_SCHEME.match(stripped) else ensure_scheme(stripped)
    parsed = urlparse(candidate)
    if parsed.scheme not in ("http", "https") or not parsed.netloc or " " in parsed.netloc:
        raise InvalidUrlError("Invalid URL format", url=url)

    normalized = parsed._replace(scheme=parsed.scheme.lower(), netloc=parsed.netloc.lower())
    return urlunparse(normalized)


def parse_url_list(raw: str) -> list[str]:
    """Split a comma-separated URL list and normalize each entry."""
    urls = [normalize_target_url(part) for part in raw.split(",") if part.strip()]
    if not urls:
        raise InvalidUrlError("At least one URL is required", url=raw)
    if len(urls) > MAX_BATCH_URLS:
        raise InvalidUrlError(f"Maximum {MAX_BATCH_URLS} URLs allowed", url=raw)
    return urls


def extract_urls_from_text(text: str, limit: int = MAX_BATCH_URLS) -> list[str]:
    """Pull URLs (or bare domains) out of free text, one candidate per line."""
    urls: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        match = _URL_IN_TEXT.search(line)
        if match:
            urls.append(match.group(0))
        elif _BARE_DOMAIN.match(line):
            urls.append(f"https://{line}")
    return urls[:limit]
