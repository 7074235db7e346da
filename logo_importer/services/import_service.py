"""
logo_importer/services/import_service.py

Service orchestration: token exchange, scraping (or cache reuse), reconciliation.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import requests

from logo_importer.config import (
    ImporterSettings,
    ScrapeHTTPSettings,
    StoryblokSettings,
    get_importer_settings,
    get_scrape_http_settings,
    get_storyblok_settings,
)
from logo_importer.connectors import StoryblokClient
from logo_importer.domain import ReconcileSummary
from logo_importer.logging_utils import log_event
from logo_importer.reconciliation import AssetUploader, EntryReconciler, PayloadBuilder
from logo_importer.scraping import (
    BatchScraper,
    FaviconDiscoveryService,
    HTMLFaviconDiscovery,
    LogoResolver,
    PageFetcher,
)
from logo_importer.services.input_source import read_website_rows
from logo_importer.storage import JsonCacheStore, JsonFailureLogStore

logger = logging.getLogger(__name__)

PhaseProgressCallback = Callable[[str, int, int], None]

SCRAPE_PHASE = "scrape"
RECONCILE_PHASE = "reconcile"


@dataclass(frozen=True)
class ImportRequest:
    """
    Credentials and targets for one import run.
    """

    oauth_token: str
    space_id: str
    folder_id: str | None = None
    input_file: str | None = None
    concurrency_limit: int | None = None


@dataclass(frozen=True)
class ImportReport:
    websites: int
    logos_found: int
    from_cache: bool
    reconcile: ReconcileSummary


class LogoImportService:
    """
    Runs the scrape phase, then the reconcile phase; the two never overlap.

    Fatal conditions (input file missing, space token exchange failing)
    propagate. A cache written by the scrape phase survives any later failure.
    """

    def __init__(
        self,
        *,
        settings: ImporterSettings | None = None,
        http_settings: ScrapeHTTPSettings | None = None,
        storyblok_settings: StoryblokSettings | None = None,
        scrape_session: requests.Session | None = None,
        storyblok_session: requests.Session | None = None,
        favicon_service: FaviconDiscoveryService | None = None,
        on_progress: PhaseProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._settings = settings or get_importer_settings()
        self._http_settings = http_settings or get_scrape_http_settings()
        self._storyblok_settings = storyblok_settings or get_storyblok_settings()
        self._scrape_session = scrape_session or requests.Session()
        self._storyblok_session = storyblok_session or requests.Session()
        self._favicon_service = favicon_service
        self._on_progress = on_progress
        self._cancel_event = cancel_event

    def run(self, request: ImportRequest) -> ImportReport:
        Path(self._settings.data_dir).mkdir(parents=True, exist_ok=True)
        limit = max(1, request.concurrency_limit or self._settings.concurrency_limit)

        client = StoryblokClient(
            oauth_token=request.oauth_token,
            space_id=request.space_id,
            settings=self._storyblok_settings,
            session=self._storyblok_session,
        )
        client.connect()

        fetcher = PageFetcher(settings=self._http_settings, session=self._scrape_session)
        scraper = BatchScraper(
            resolver=LogoResolver(
                fetcher=fetcher,
                favicon_service=self._favicon_service or HTMLFaviconDiscovery(fetcher=fetcher),
                favicon_on_home_failure=self._settings.favicon_on_home_failure,
            ),
            cache=JsonCacheStore(self._settings.cache_path),
            concurrency_limit=limit,
            on_progress=self._phase_progress(SCRAPE_PHASE),
            cancel_event=self._cancel_event,
        )

        records = scraper.cached_records()
        from_cache = bool(records)
        if not from_cache:
            input_file = request.input_file or self._settings.input_file
            rows = read_website_rows(input_file)
            log_event(logger, logging.INFO, "input_loaded", input_file=input_file, websites=len(rows))
            records = scraper.scrape(rows, limit)

        reconciler = EntryReconciler(
            client=client,
            payload_builder=PayloadBuilder(
                uploader=AssetUploader(
                    client=client,
                    fetcher=fetcher,
                    timeout_seconds=self._storyblok_settings.timeout_seconds,
                ),
                folder_id=request.folder_id,
            ),
            failure_log=JsonFailureLogStore(self._settings.log_path),
            folder_id=request.folder_id,
            concurrency_limit=limit,
            on_progress=self._phase_progress(RECONCILE_PHASE),
            cancel_event=self._cancel_event,
        )
        summary = reconciler.reconcile(records)

        return ImportReport(
            websites=len(records),
            logos_found=sum(1 for record in records if record.logo),
            from_cache=from_cache,
            reconcile=summary,
        )

    def _phase_progress(self, phase: str) -> Callable[[int, int], None] | None:
        if self._on_progress is None:
            return None
        return functools.partial(self._on_progress, phase)
