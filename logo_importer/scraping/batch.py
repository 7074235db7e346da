"""
Batch logo scraping with bounded concurrency and an all-or-nothing cache.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import replace

from logo_importer.concurrency import DEFAULT_CONCURRENCY_LIMIT, ProgressCallback, run_bounded
from logo_importer.domain import LogoReference, WebsiteRecord
from logo_importer.logging_utils import log_event
from logo_importer.scraping.resolver import LogoResolver
from logo_importer.scraping.urls import normalize_site_url
from logo_importer.storage import SnapshotStore

logger = logging.getLogger(__name__)


class BatchCancelledError(RuntimeError):
    """
    Raised when a scrape is cancelled before every record was dispatched.

    The partial records are attached but were not written to the cache.
    """

    def __init__(self, *, completed: int, total: int, records: list[WebsiteRecord]) -> None:
        super().__init__(f"Scraping cancelled after {completed} of {total} sites.")
        self.completed = completed
        self.total = total
        self.records = records


class BatchScraper:
    """
    Resolves logos for an ordered batch of websites.
    """

    def __init__(
        self,
        *,
        resolver: LogoResolver,
        cache: SnapshotStore,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._resolver = resolver
        self._cache = cache
        self._concurrency_limit = max(1, concurrency_limit)
        self._on_progress = on_progress
        self._cancel_event = cancel_event

    def cached_records(self) -> list[WebsiteRecord]:
        return self._cache.load()

    def scrape(
        self,
        records: Sequence[WebsiteRecord],
        concurrency_limit: int | None = None,
    ) -> list[WebsiteRecord]:
        """
        Return `records` enriched with logos, in input order.

        A non-empty cache snapshot is returned as-is without any network call.
        """

        cached = self._cache.load()
        if cached:
            log_event(logger, logging.INFO, "scrape_skipped_cache_hit", records=len(cached))
            return cached

        limit = max(1, concurrency_limit or self._concurrency_limit)
        log_event(logger, logging.INFO, "scrape_started", records=len(records), concurrency=limit)

        run = run_bounded(
            list(records),
            self._enrich,
            limit=limit,
            on_progress=self._report_progress,
            cancel_event=self._cancel_event,
            thread_name_prefix="logo-scrape",
        )
        enriched = [
            result if result is not None else replace(record, logo=LogoReference.absent())
            for record, result in zip(records, run.results)
        ]

        if run.cancelled:
            log_event(
                logger,
                logging.WARNING,
                "scrape_cancelled",
                completed=run.completed,
                total=len(records),
            )
            raise BatchCancelledError(completed=run.completed, total=len(records), records=enriched)

        self._cache.save(enriched)
        found = sum(1 for record in enriched if record.logo)
        log_event(
            logger,
            logging.INFO,
            "scrape_completed",
            records=len(enriched),
            logos_found=found,
        )
        return enriched

    def _enrich(self, record: WebsiteRecord) -> WebsiteRecord:
        if not record.has_url:
            record.logo = LogoReference.absent()
            return record

        record.url = normalize_site_url(record.url)
        record.logo = self._resolver.resolve(record.url)
        return record

    def _report_progress(self, completed: int, total: int) -> None:
        log_event(logger, logging.DEBUG, "scrape_progress", completed=completed, total=total)
        if self._on_progress is not None:
            self._on_progress(completed, total)
