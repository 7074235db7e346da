"""
Favicon discovery: icon candidates a site advertises, with their declared sizes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from bs4 import BeautifulSoup

from logo_importer.logging_utils import log_event
from logo_importer.scraping.fetcher import FetchError, PageFetcher
from logo_importer.scraping.urls import absolute_url, site_base

logger = logging.getLogger(__name__)

ICON_RELS = (
    "icon",
    "shortcut icon",
    "apple-touch-icon",
    "apple-touch-icon-precomposed",
    "mask-icon",
)


@dataclass(frozen=True)
class FaviconCandidate:
    source: str
    sizes: str | None = None


class FaviconDiscoveryService(Protocol):
    def discover(
        self,
        base_url: str,
        document: BeautifulSoup | None = None,
    ) -> list[FaviconCandidate]:
        """
        Return icon candidates for the site at `base_url`.

        `document` is the already-parsed homepage, when the caller has one.
        """


class HTMLFaviconDiscovery:
    """
    Reads `<link rel="...icon...">` declarations and checks `/favicon.ico`.

    `/favicon.ico` is still checked when the homepage cannot be fetched.
    """

    def __init__(self, *, fetcher: PageFetcher, check_default_icon: bool = True) -> None:
        self._fetcher = fetcher
        self._check_default_icon = check_default_icon

    def discover(
        self,
        base_url: str,
        document: BeautifulSoup | None = None,
    ) -> list[FaviconCandidate]:
        base = site_base(base_url)
        if document is None:
            document = self._fetch_page(base)

        candidates: list[FaviconCandidate] = []
        seen: set[str] = set()
        links = document.find_all("link", href=True) if document is not None else []
        for link in links:
            rel = " ".join(link.get("rel") or []).strip().lower()
            if rel not in ICON_RELS:
                continue
            source = absolute_url(link.get("href"), base)
            if not source or source in seen:
                continue
            seen.add(source)
            sizes = (link.get("sizes") or "").strip() or None
            candidates.append(FaviconCandidate(source=source, sizes=sizes))

        default_icon = f"{base}/favicon.ico"
        if (
            self._check_default_icon
            and default_icon not in seen
            and self._fetcher.is_available(default_icon)
        ):
            candidates.append(FaviconCandidate(source=default_icon))

        log_event(
            logger,
            logging.DEBUG,
            "favicons_discovered",
            base_url=base,
            candidates=len(candidates),
        )
        return candidates

    def _fetch_page(self, base: str) -> BeautifulSoup | None:
        try:
            return BeautifulSoup(self._fetcher.get_text(base), "html.parser")
        except FetchError as exc:
            log_event(
                logger,
                logging.DEBUG,
                "favicon_page_unavailable",
                base_url=base,
                status_code=exc.status_code,
            )
            return None
