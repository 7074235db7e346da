"""
logo_importer/domain/reconciliation.py

Domain models for reconciling websites into remote entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ReconcileAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass(frozen=True)
class LogoAsset:
    """
    Asset field stored on a remote entry's content.
    """

    id: int | str
    alt: str
    filename: str
    fieldtype: str = "asset"

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "alt": self.alt,
            "filename": self.filename,
            "fieldtype": self.fieldtype,
        }


@dataclass(frozen=True)
class FailureLogEntry:
    """
    One failed website, kept for the external audit log.
    """

    website_name: str
    message: str


@dataclass(frozen=True)
class ReconcileOutcome:
    """
    Result of reconciling one website, handed back to the coordinator.
    """

    website_name: str
    action: ReconcileAction
    message: str | None = None
    logo_uploaded: bool = False

    @property
    def failed(self) -> bool:
        return self.action is ReconcileAction.FAILED


@dataclass(frozen=True)
class ReconcileSummary:
    """
    Totals for one reconciliation run.
    """

    total: int
    created: int
    updated: int
    failures: list[FailureLogEntry] = field(default_factory=list)
    cancelled: bool = False
