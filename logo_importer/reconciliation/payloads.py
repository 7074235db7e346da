"""
Create/update payloads for website entries, including the logo diff.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any

from logo_importer.domain import LogoAsset, LogoReference, WebsiteRecord
from logo_importer.logging_utils import log_event
from logo_importer.reconciliation.uploader import AssetUploader, AssetUploadError, upload_filename
from logo_importer.scraping.urls import asset_basename

logger = logging.getLogger(__name__)

WEBSITE_COMPONENT = "website"


@dataclass(frozen=True)
class StoryPayload:
    body: dict[str, Any]
    logo_uploaded: bool = False


def stored_logo(story: dict[str, Any] | None) -> dict[str, Any] | None:
    if not story:
        return None
    content = story.get("content")
    logo = content.get("logo") if isinstance(content, dict) else None
    return logo if isinstance(logo, dict) and logo else None


def needs_logo_upload(logo: LogoReference, story: dict[str, Any] | None) -> bool:
    """
    True when `logo` is present and differs by filename from the stored asset.
    """

    if logo.is_absent:
        return False
    current = stored_logo(story)
    current_name = asset_basename(current.get("filename")) if current else ""
    return upload_filename(logo) != current_name


class PayloadBuilder:
    def __init__(self, *, uploader: AssetUploader, folder_id: int | str | None = None) -> None:
        self._uploader = uploader
        self._folder_id = folder_id

    def build_create(self, record: WebsiteRecord, slug: str) -> StoryPayload:
        story: dict[str, Any] = {
            "name": record.name,
            "slug": slug,
            "content": {"component": WEBSITE_COMPONENT, "website": record.url},
        }
        if self._folder_id:
            story["parent_id"] = self._folder_id

        asset = self._upload(record) if record.logo else None
        if asset is not None:
            story["content"]["logo"] = asset.to_payload()
        return StoryPayload(body={"story": story}, logo_uploaded=asset is not None)

    def build_update(self, record: WebsiteRecord, existing: dict[str, Any]) -> StoryPayload:
        """
        Reuse the existing story's identity; fields other than website and logo are kept.
        """

        story = copy.deepcopy(existing)
        content = story.get("content") if isinstance(story.get("content"), dict) else {}
        content.update({"component": WEBSITE_COMPONENT, "website": record.url})
        story["content"] = content

        current = stored_logo(existing)
        asset = self._upload(record) if needs_logo_upload(record.logo, existing) else None
        if asset is not None:
            content["logo"] = asset.to_payload()
        elif current is not None:
            content["logo"] = current
        else:
            content.pop("logo", None)

        body: dict[str, Any] = {"story": story}
        if existing.get("published_at"):
            body["publish"] = 1
        return StoryPayload(body=body, logo_uploaded=asset is not None)

    def _upload(self, record: WebsiteRecord) -> LogoAsset | None:
        try:
            ticket = self._uploader.upload(record.logo)
        except AssetUploadError as exc:
            log_event(
                logger,
                logging.WARNING,
                "logo_upload_failed",
                website=record.name,
                logo=record.logo.value[:200],
                error=str(exc),
                cause=str(exc.__cause__) if exc.__cause__ else None,
            )
            return None
        return LogoAsset(id=ticket.id, alt=f"{record.name} Logo", filename=ticket.pretty_url)
