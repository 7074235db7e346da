"""
HTTP fetch mechanics for homepage, manifest and asset downloads.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from logo_importer.config import ScrapeHTTPSettings
from logo_importer.logging_utils import log_event

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class FetchError(RuntimeError):
    """
    Raised when a resource cannot be fetched; strategies treat it as "no candidate".
    """

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PageFetcher:
    """
    GET with a per-request timeout and bounded retries on transient failures.
    """

    def __init__(
        self,
        *,
        settings: ScrapeHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._headers = {
            "User-Agent": settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
        }

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def timeout_seconds(self) -> float:
        return self._settings.timeout_seconds

    def get_text(self, url: str) -> str:
        return self.get(url).text

    def get_json(self, url: str) -> Any:
        response = self.get(url)
        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(f"Response was not valid JSON url={url}", url=url) from exc

    def get_bytes(self, url: str) -> bytes:
        return self.get(url).content

    def is_available(self, url: str) -> bool:
        """
        Single-attempt check: True when `url` answers 200 with a body.
        """

        try:
            response = self._session.get(
                url,
                headers=self._headers,
                timeout=self._settings.timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException:
            return False
        return response.status_code == 200 and bool(response.content)

    def get(self, url: str) -> requests.Response:
        last_error: Exception | None = None
        last_status: int | None = None

        for attempt in range(self._settings.max_retries + 1):
            try:
                response = self._session.get(
                    url,
                    headers=self._headers,
                    timeout=self._settings.timeout_seconds,
                    allow_redirects=True,
                )
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable status={response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except (requests.Timeout, requests.ConnectionError, requests.HTTPError) as exc:
                last_error = exc
                last_status = None
                if isinstance(exc, requests.HTTPError):
                    status_code = exc.response.status_code if exc.response is not None else None
                    last_status = status_code
                    if status_code not in RETRYABLE_STATUS_CODES:
                        raise FetchError(
                            f"Fetch failed status={status_code} url={url}",
                            url=url,
                            status_code=status_code,
                        ) from exc
            except requests.RequestException as exc:
                raise FetchError(f"Fetch failed url={url} error={exc}", url=url) from exc

            if attempt >= self._settings.max_retries:
                break

            backoff_seconds = self._settings.backoff_initial_seconds * (
                self._settings.backoff_multiplier**attempt
            )
            log_event(
                logger,
                logging.DEBUG,
                "fetch_retry",
                url=url,
                attempt=attempt + 1,
                wait_seconds=backoff_seconds,
            )
            time.sleep(backoff_seconds)

        raise FetchError(
            f"Failed to fetch {url} after retries: {last_error}",
            url=url,
            status_code=last_status,
        ) from last_error
