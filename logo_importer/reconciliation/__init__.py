"""
Reconciliation of enriched websites into remote entries.
"""

from logo_importer.reconciliation.payloads import PayloadBuilder, StoryPayload, needs_logo_upload
from logo_importer.reconciliation.reconciler import EntryReconciler
from logo_importer.reconciliation.slugs import story_slug
from logo_importer.reconciliation.uploader import AssetUploader, AssetUploadError, upload_filename

__all__ = [
    "AssetUploadError",
    "AssetUploader",
    "EntryReconciler",
    "PayloadBuilder",
    "StoryPayload",
    "needs_logo_upload",
    "story_slug",
    "upload_filename",
]
