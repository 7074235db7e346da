"""
URL normalization helpers shared by logo strategies and reconciliation.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

_SCHEME_REGEX = re.compile(r"^[a-z][a-z0-9+.-]*://", flags=re.IGNORECASE)


def normalize_site_url(raw_url: str) -> str:
    """
    Prefix `https://` when the input row carries a bare host.
    """

    url = raw_url.strip()
    if not url:
        return ""
    if _SCHEME_REGEX.match(url):
        return url
    return f"https://{url.lstrip('/')}"


def site_base(site_url: str) -> str:
    return site_url.strip().rstrip("/")


def absolute_url(reference: str | None, base_url: str) -> str:
    """
    Resolve a document reference against the site base.

    Data URIs and unparseable references come back as an empty string.
    """

    candidate = (reference or "").strip()
    if not candidate or candidate.lower().startswith("data:"):
        return ""

    try:
        parsed = urlparse(candidate)
    except ValueError:
        return ""
    if parsed.netloc:
        if not parsed.scheme:
            scheme = urlparse(base_url).scheme or "https"
            return f"{scheme}:{candidate}"
        return candidate

    return f"{site_base(base_url)}/{candidate[1:] if candidate.startswith('/') else candidate}"


def asset_basename(value: str | None) -> str:
    """
    Last path segment with query string and fragment removed.
    """

    text = (value or "").strip()
    text = text.split("#", 1)[0].split("?", 1)[0]
    return text.rstrip("/").rsplit("/", 1)[-1]
