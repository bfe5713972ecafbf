# site_harvest/crawler/urls.py
"""
Same-origin URL resolution for SiteHarvest.
"""
from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlsplit

_DEFAULT_PORTS = {"http": 80, "https": 443}


def origin_of(url: str) -> str:
    """
    Return ``scheme://host[:port]`` for an absolute URL.

    Scheme and host are lowercased and a default port is dropped, so
    ``HTTPS://Example.test:443/a`` gives ``https://example.test``.
    Raises ValueError when *url* has no scheme or host.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = parts.hostname
    if not scheme or not host:
        raise ValueError(f"not an absolute URL: {url!r}")
    port = parts.port  # ValueError on garbage ports
    if ":" in host:
        host = f"[{host}]"
    if port is None or _DEFAULT_PORTS.get(scheme) == port:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def _is_absolute(href: str) -> bool:
    return bool(urlsplit(href).scheme)


def resolve_href(href: Optional[str], base_origin: str) -> Optional[str]:
    """
    Turn a raw ``href`` attribute into a same-origin absolute URL.

    Returns None for empty hrefs, in-page anchors (``#...``), links that leave
    *base_origin* and anything urllib refuses to parse.
    """
    if href is None:
        return None
    raw = href.strip()
    if not raw or raw.startswith("#"):
        return None
    try:
        absolute = raw if _is_absolute(raw) else urljoin(base_origin, raw)
        if not absolute.startswith(base_origin):
            return None
        # "https://a.test" is also a prefix of "https://a.test.evil/"
        if origin_of(absolute) != base_origin:
            return None
    except ValueError:
        return None
    return absolute


def remove_duplicates(urls: Iterable[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    return list(dict.fromkeys(urls))


__all__ = ["origin_of", "resolve_href", "remove_duplicates"]
