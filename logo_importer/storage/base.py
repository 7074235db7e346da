"""
Storage interfaces for the enriched-record cache and the failure log.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from logo_importer.domain import FailureLogEntry, WebsiteRecord


class SnapshotStore(ABC):
    """
    Single snapshot of enriched records; the only resumability artifact.
    """

    @abstractmethod
    def load(self) -> list[WebsiteRecord]:
        """
        Return the cached records, or an empty list when there is no usable snapshot.
        """

    @abstractmethod
    def save(self, records: Sequence[WebsiteRecord]) -> None:
        """
        Replace the snapshot with `records`.
        """


class FailureLogStore(ABC):
    @abstractmethod
    def write(self, entries: Sequence[FailureLogEntry]) -> None:
        """
        Persist the failures of one reconciliation run.
        """
