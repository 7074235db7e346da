"""
logo_importer/domain package marker.
"""

from logo_importer.domain.reconciliation import (
    FailureLogEntry,
    LogoAsset,
    ReconcileAction,
    ReconcileOutcome,
    ReconcileSummary,
)
from logo_importer.domain.website import LogoKind, LogoReference, WebsiteRecord

__all__ = [
    "FailureLogEntry",
    "LogoAsset",
    "LogoKind",
    "LogoReference",
    "ReconcileAction",
    "ReconcileOutcome",
    "ReconcileSummary",
    "WebsiteRecord",
]
