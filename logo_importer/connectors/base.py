"""
logo_importer/connectors/base.py

Shared HTTP mechanics for remote API connectors.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from logo_importer.connectors.rate_limiter import HostRateLimiter

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector request fails or exhausts its retries.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HTTPConnector:
    """
    Rate-limited JSON requests with exponential backoff on transient failures.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        timeout_seconds: float,
        max_retries: int,
        backoff_initial_seconds: float,
        backoff_multiplier: float,
        rate_limiter: HostRateLimiter | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds
        self._max_retries = max(0, max_retries)
        self._backoff_initial_seconds = backoff_initial_seconds
        self._backoff_multiplier = backoff_multiplier
        self._rate_limiter = rate_limiter

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON (an empty dict for empty bodies).
        """

        response = self._request(
            method=method,
            url=url,
            params=params,
            json_body=json_body,
            headers=headers,
        )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(
                f"{self.source}: response was not valid JSON.",
                status_code=response.status_code,
            ) from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        last_error: Exception | None = None
        last_status: int | None = None
        for attempt in range(self._max_retries + 1):
            if self._rate_limiter is not None:
                self._rate_limiter.wait(url)
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json_body,
                    headers=headers,
                    timeout=self._timeout_seconds,
                )
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                last_status = exc.response.status_code if exc.response is not None else None
                if last_status not in RETRYABLE_STATUS_CODES:
                    logger.warning(
                        "Connector request failed source=%s method=%s status=%s url=%s",
                        self.source,
                        method,
                        last_status,
                        url,
                    )
                    raise ConnectorRequestError(
                        f"{self.source}: {method} {url} failed with status {last_status}.",
                        status_code=last_status,
                    ) from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
                last_status = None
            except requests.RequestException as exc:
                raise ConnectorRequestError(f"{self.source}: {method} {url} failed: {exc}") from exc

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._retry_after(last_error) or self._backoff_initial_seconds * (
                self._backoff_multiplier**attempt
            )
            logger.warning(
                "Connector request retry source=%s attempt=%s/%s wait_seconds=%.2f url=%s",
                self.source,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                url,
            )
            time.sleep(backoff_seconds)

        logger.error(
            "Connector request exhausted retries source=%s url=%s error=%s",
            self.source,
            url,
            last_error,
        )
        raise ConnectorRequestError(
            f"{self.source}: {method} {url} failed after retries.",
            status_code=last_status,
        ) from last_error

    @staticmethod
    def _retry_after(error: Exception | None) -> float | None:
        response = getattr(error, "response", None)
        if response is None or response.status_code != 429:
            return None
        raw = (response.headers or {}).get("Retry-After")
        try:
            return max(0.0, float(raw)) if raw is not None else None
        except (TypeError, ValueError):
            return None
