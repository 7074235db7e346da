"""
Logo resolution: homepage fetch followed by the strategy chain.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bs4 import BeautifulSoup

from logo_importer.domain import LogoReference
from logo_importer.logging_utils import log_event
from logo_importer.scraping.favicon import FaviconDiscoveryService
from logo_importer.scraping.fetcher import FetchError, PageFetcher
from logo_importer.scraping.strategies import DEFAULT_STRATEGIES, ResolutionContext, Strategy
from logo_importer.scraping.urls import site_base

logger = logging.getLogger(__name__)


class LogoResolver:
    """
    Finds one representative logo for a site. Never raises.

    Strategies run in order and the first non-empty result wins; a strategy
    that raises is logged and skipped. When the homepage is unreachable only
    strategies that do not need the parsed page (the favicon service) get a
    chance, and only if `favicon_on_home_failure`.
    """

    def __init__(
        self,
        *,
        fetcher: PageFetcher,
        favicon_service: FaviconDiscoveryService | None = None,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
        favicon_on_home_failure: bool = True,
    ) -> None:
        self._fetcher = fetcher
        self._favicon_service = favicon_service
        self._strategies = tuple(strategies)
        self._favicon_on_home_failure = favicon_on_home_failure

    def resolve(self, site_url: str) -> LogoReference:
        base_url = site_base(site_url)
        if not base_url:
            return LogoReference.absent()

        try:
            return self._resolve(base_url)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "logo_resolution_crashed",
                site_url=base_url,
                error=str(exc),
            )
            return LogoReference.absent()

    def _resolve(self, base_url: str) -> LogoReference:
        document = self._fetch_home(base_url)
        if document is None and not self._favicon_on_home_failure:
            return LogoReference.absent()

        context = ResolutionContext(
            base_url=base_url,
            document=document,
            fetcher=self._fetcher,
            favicon_service=self._favicon_service,
        )
        for strategy in self._strategies:
            try:
                found = strategy(context)
            except Exception as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "strategy_failed",
                    site_url=base_url,
                    strategy=getattr(strategy, "__name__", repr(strategy)),
                    error=str(exc),
                )
                continue
            if found:
                log_event(
                    logger,
                    logging.DEBUG,
                    "logo_resolved",
                    site_url=base_url,
                    strategy=strategy.__name__,
                    kind=found.kind.value,
                )
                return found
        return LogoReference.absent()

    def _fetch_home(self, base_url: str) -> BeautifulSoup | None:
        try:
            html = self._fetcher.get_text(base_url)
        except FetchError as exc:
            log_event(
                logger,
                logging.WARNING,
                "homepage_fetch_failed",
                site_url=base_url,
                status_code=exc.status_code,
                error=str(exc),
            )
            return None
        return BeautifulSoup(html, "html.parser")
