"""
Reconciles enriched website records into Storyblok stories.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from logo_importer.concurrency import DEFAULT_CONCURRENCY_LIMIT, ProgressCallback, run_bounded
from logo_importer.connectors import ConnectorRequestError, StoryblokClient
from logo_importer.domain import (
    FailureLogEntry,
    ReconcileAction,
    ReconcileOutcome,
    ReconcileSummary,
    WebsiteRecord,
)
from logo_importer.logging_utils import log_event
from logo_importer.reconciliation.payloads import PayloadBuilder
from logo_importer.reconciliation.slugs import story_slug
from logo_importer.schemas import StoryEnvelope
from logo_importer.storage import FailureLogStore

logger = logging.getLogger(__name__)


def _error_summary(exc: Exception) -> str:
    status_code = getattr(exc, "status_code", None)
    suffix = f" (status {status_code})" if status_code else ""
    return f"{type(exc).__name__}: {exc}{suffix}"


class EntryReconciler:
    """
    Creates missing stories and updates existing ones, one website per task.

    Per-record failures become failure-log entries and never stop the batch.
    """

    def __init__(
        self,
        *,
        client: StoryblokClient,
        payload_builder: PayloadBuilder,
        failure_log: FailureLogStore,
        folder_id: int | str | None = None,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._client = client
        self._payload_builder = payload_builder
        self._failure_log = failure_log
        self._folder_id = folder_id
        self._concurrency_limit = max(1, concurrency_limit)
        self._on_progress = on_progress
        self._cancel_event = cancel_event

    def reconcile(self, records: Sequence[WebsiteRecord]) -> ReconcileSummary:
        folder_slug = self._resolve_folder_slug()
        log_event(
            logger,
            logging.INFO,
            "reconcile_started",
            records=len(records),
            folder_slug=folder_slug,
        )

        run = run_bounded(
            list(records),
            lambda record: self._reconcile_one(record, folder_slug),
            limit=self._concurrency_limit,
            on_progress=self._report_progress,
            cancel_event=self._cancel_event,
            thread_name_prefix="reconcile",
        )
        outcomes = [outcome for outcome in run.results if outcome is not None]
        failures = [
            FailureLogEntry(website_name=outcome.website_name, message=outcome.message or "")
            for outcome in outcomes
            if outcome.failed
        ]
        self._failure_log.write(failures)

        summary = ReconcileSummary(
            total=len(records),
            created=sum(1 for outcome in outcomes if outcome.action is ReconcileAction.CREATED),
            updated=sum(1 for outcome in outcomes if outcome.action is ReconcileAction.UPDATED),
            failures=failures,
            cancelled=run.cancelled,
        )
        log_event(
            logger,
            logging.INFO,
            "reconcile_completed",
            total=summary.total,
            created=summary.created,
            updated=summary.updated,
            failed=len(summary.failures),
            cancelled=summary.cancelled,
        )
        return summary

    def _reconcile_one(self, record: WebsiteRecord, folder_slug: str | None) -> ReconcileOutcome:
        try:
            slug = story_slug(record.name)
            existing = self._find_story(slug, folder_slug)
            if existing is not None:
                payload = self._payload_builder.build_update(record, existing)
                story_id = payload.body["story"]["id"]
                self._client.put(f"spaces/{self._client.space_id}/stories/{story_id}", payload.body)
                action = ReconcileAction.UPDATED
            else:
                payload = self._payload_builder.build_create(record, slug)
                self._client.post(f"spaces/{self._client.space_id}/stories", payload.body)
                action = ReconcileAction.CREATED
        except Exception as exc:
            message = _error_summary(exc)
            log_event(
                logger,
                logging.ERROR,
                "reconcile_failed",
                website=record.name,
                error=message,
            )
            return ReconcileOutcome(
                website_name=record.name,
                action=ReconcileAction.FAILED,
                message=message,
            )

        log_event(
            logger,
            logging.DEBUG,
            "story_saved",
            website=record.name,
            slug=slug,
            action=action.value,
            logo_uploaded=payload.logo_uploaded,
        )
        return ReconcileOutcome(
            website_name=record.name,
            action=action,
            logo_uploaded=payload.logo_uploaded,
        )

    def _find_story(self, slug: str, folder_slug: str | None) -> dict[str, Any] | None:
        """
        Draft story at the slug, or None when it cannot be read for any reason.
        """

        path = f"cdn/stories/{folder_slug}/{slug}" if folder_slug else f"cdn/stories/{slug}"
        try:
            story = StoryEnvelope.model_validate(
                self._client.get(path, {"version": "draft"})
            ).story
        except (ConnectorRequestError, ValidationError) as exc:
            log_event(
                logger,
                logging.DEBUG,
                "story_lookup_missed",
                path=path,
                status_code=getattr(exc, "status_code", None),
            )
            return None
        return story if story.get("id") is not None else None

    def _resolve_folder_slug(self) -> str | None:
        if not self._folder_id:
            return None
        try:
            folder = StoryEnvelope.model_validate(
                self._client.get(f"spaces/{self._client.space_id}/stories/{self._folder_id}")
            ).story
        except (ConnectorRequestError, ValidationError) as exc:
            log_event(
                logger,
                logging.WARNING,
                "folder_lookup_failed",
                folder_id=self._folder_id,
                error=str(exc),
            )
            return None
        full_slug = str(folder.get("full_slug") or "").strip("/")
        return full_slug or None

    def _report_progress(self, completed: int, total: int) -> None:
        log_event(logger, logging.DEBUG, "reconcile_progress", completed=completed, total=total)
        if self._on_progress is not None:
            self._on_progress(completed, total)
