"""URL helpers: target resolution, href normalisation, display paths."""

from urllib.parse import urldefrag, urljoin, urlparse

from .errors import InputError
from .patterns import LOGIN_ROUTE_TOKENS, SKIPPED_HREF_PREFIXES


def normalize_url(url: str) -> str:
    """Add a scheme to bare hostnames."""
    url = (url or '').strip()
    if url and not url.startswith('http'):
        url = 'https://' + url
    return url


def resolve_target_urls(url: str = '', urls: list = None, pages: list = None) -> list:
    """Return the ordered, de-duplicated list of pages to analyse.

    ``urls`` (or its alias ``pages``) wins over a single ``url``. Raises
    InputError when nothing usable is provided.
    """
    candidates = list(urls or []) or list(pages or []) or ([url] if url else [])
    targets = []
    for candidate in candidates:
        normalized = normalize_url(candidate)
        if normalized and normalized not in targets:
            targets.append(normalized)
    if not targets:
        raise InputError('URL or URLs array is required')
    return targets


def is_skipped_href(href: str) -> bool:
    """True for in-page anchors and non-navigational schemes."""
    lower = (href or '').strip().lower()
    return not lower or lower.startswith(SKIPPED_HREF_PREFIXES)


def absolute_href(href: str, page_url: str) -> str:
    """Resolve ``href`` against the page it was found on, dropping fragments."""
    resolved, _fragment = urldefrag(urljoin(page_url, href.strip()))
    return resolved


def get_path(url: str, max_len: int = 60) -> str:
    """Path used in human-readable test steps."""
    parsed = urlparse(url)
    path = parsed.path or '/'
    if parsed.query:
        path = f'{path}?{parsed.query}'
    if len(path) > max_len:
        path = '...' + path[-(max_len - 3):]
    return path


def is_login_route(url: str) -> bool:
    """True if the URL still looks like a login/auth page."""
    lower = (url or '').lower()
    return any(token in lower for token in LOGIN_ROUTE_TOKENS)
