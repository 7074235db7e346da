"""
logo_importer/schemas package marker.
"""

from logo_importer.schemas.cache import (
    CacheSnapshotPayload,
    FailureLogEntryPayload,
    FailureLogPayload,
    LogoPayload,
    WebsiteRecordPayload,
)
from logo_importer.schemas.storyblok import SpaceEnvelope, StoryEnvelope, UploadTicket

__all__ = [
    "CacheSnapshotPayload",
    "FailureLogEntryPayload",
    "FailureLogPayload",
    "LogoPayload",
    "SpaceEnvelope",
    "StoryEnvelope",
    "UploadTicket",
    "WebsiteRecordPayload",
]
