"""
JSON file implementations of the cache and failure log stores.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from logo_importer.domain import FailureLogEntry, WebsiteRecord
from logo_importer.logging_utils import log_event
from logo_importer.schemas import CacheSnapshotPayload, FailureLogPayload
from logo_importer.storage.base import FailureLogStore, SnapshotStore

logger = logging.getLogger(__name__)


def _write_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class JsonCacheStore(SnapshotStore):
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[WebsiteRecord]:
        if not self._path.exists():
            return []
        try:
            payload = CacheSnapshotPayload.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            log_event(
                logger,
                logging.WARNING,
                "cache_unreadable",
                path=str(self._path),
                error=str(exc),
            )
            return []
        records = payload.to_records()
        log_event(logger, logging.INFO, "cache_loaded", path=str(self._path), records=len(records))
        return records

    def save(self, records: Sequence[WebsiteRecord]) -> None:
        payload = CacheSnapshotPayload.from_records(list(records))
        _write_atomic(self._path, payload.model_dump_json(indent=2))
        log_event(logger, logging.INFO, "cache_written", path=str(self._path), records=len(records))


class JsonFailureLogStore(FailureLogStore):
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entries: Sequence[FailureLogEntry]) -> None:
        payload = FailureLogPayload.from_entries(list(entries))
        _write_atomic(self._path, payload.model_dump_json(indent=2))
        log_event(
            logger,
            logging.INFO,
            "failure_log_written",
            path=str(self._path),
            failures=len(entries),
        )
