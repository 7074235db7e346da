"""
Signed-URL asset upload protocol.
"""

from __future__ import annotations

import logging
import mimetypes

import requests
from pydantic import ValidationError

from logo_importer.connectors import StoryblokClient, StoryblokRequestError
from logo_importer.domain import LogoReference
from logo_importer.logging_utils import log_event
from logo_importer.schemas import UploadTicket
from logo_importer.scraping.fetcher import FetchError, PageFetcher
from logo_importer.scraping.urls import asset_basename

logger = logging.getLogger(__name__)

INLINE_LOGO_FILENAME = "logo.svg"
FALLBACK_LOGO_FILENAME = "logo"


class AssetUploadError(RuntimeError):
    """
    Raised when any stage of an asset upload fails.
    """


def upload_filename(logo: LogoReference) -> str:
    """
    Filename an asset is uploaded under, also used to detect unchanged logos.
    """

    if logo.is_inline:
        return INLINE_LOGO_FILENAME
    return asset_basename(logo.value) or FALLBACK_LOGO_FILENAME


class AssetUploader:
    """
    Requests an upload ticket, then posts the logo bytes to the signed URL.

    The logo bytes are obtained first so that no ticket is issued for a logo
    that cannot be downloaded.
    """

    def __init__(
        self,
        *,
        client: StoryblokClient,
        fetcher: PageFetcher,
        session: requests.Session | None = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        self._client = client
        self._fetcher = fetcher
        self._session = session or fetcher.session
        self._timeout_seconds = timeout_seconds

    def upload(self, logo: LogoReference) -> UploadTicket:
        if logo.is_absent:
            raise AssetUploadError("No logo to upload.")

        filename = upload_filename(logo)
        content = self._logo_bytes(logo)
        if not content:
            raise AssetUploadError(f"Logo payload is empty filename={filename}")

        ticket = self._request_ticket(filename)
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            response = self._session.post(
                ticket.post_url,
                data=ticket.form_fields(),
                files={"file": (filename, content, content_type)},
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise AssetUploadError(f"Signed upload failed filename={filename} error={exc}") from exc

        log_event(
            logger,
            logging.INFO,
            "asset_uploaded",
            filename=filename,
            asset_id=ticket.id,
            bytes=len(content),
        )
        return ticket

    def _logo_bytes(self, logo: LogoReference) -> bytes:
        if logo.is_inline:
            return logo.value.encode("utf-8")
        try:
            return self._fetcher.get_bytes(logo.value)
        except FetchError as exc:
            raise AssetUploadError(f"Logo download failed url={logo.value}") from exc

    def _request_ticket(self, filename: str) -> UploadTicket:
        try:
            payload = self._client.post(
                f"spaces/{self._client.space_id}/assets",
                {"filename": filename},
            )
            return UploadTicket.model_validate(payload)
        except (StoryblokRequestError, ValidationError) as exc:
            raise AssetUploadError(f"Upload ticket request failed filename={filename}") from exc
