"""
logo_importer/connectors/storyblok.py

Minimal Storyblok client: management API reads/writes plus draft CDN reads.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from logo_importer.config import StoryblokSettings
from logo_importer.connectors.base import ConnectorRequestError, HTTPConnector
from logo_importer.connectors.rate_limiter import HostRateLimiter
from logo_importer.logging_utils import log_event
from logo_importer.schemas import SpaceEnvelope

logger = logging.getLogger(__name__)

CDN_PREFIX = "cdn/"


class StoryblokRequestError(ConnectorRequestError):
    """
    A Storyblok call failed.
    """


class StoryblokNotFoundError(StoryblokRequestError):
    """
    The requested Storyblok resource does not exist.
    """


class StoryblokAuthError(StoryblokRequestError):
    """
    The space token exchange failed; nothing else can proceed.
    """


class StoryblokClient(HTTPConnector):
    """
    Routes `cdn/...` paths to the CDN API (space token) and everything else
    to the management API (OAuth token).

    `connect()` must succeed before any `cdn/` read.
    Both APIs draw from one `rate_limit_per_second` budget.
    """

    def __init__(
        self,
        *,
        oauth_token: str,
        space_id: str,
        settings: StoryblokSettings,
        session: requests.Session | None = None,
        rate_limiter: HostRateLimiter | None = None,
    ) -> None:
        super().__init__(
            source="storyblok",
            timeout_seconds=settings.timeout_seconds,
            max_retries=settings.max_retries,
            backoff_initial_seconds=settings.backoff_initial_seconds,
            backoff_multiplier=settings.backoff_multiplier,
            rate_limiter=rate_limiter
            or HostRateLimiter(
                rate_limit_per_second=settings.rate_limit_per_second,
                shared_key="storyblok",
            ),
            session=session,
        )
        self._oauth_token = oauth_token
        self._space_id = str(space_id)
        self._settings = settings
        self._space_token: str | None = None

    @property
    def space_id(self) -> str:
        return self._space_id

    @property
    def space_token(self) -> str | None:
        return self._space_token

    def connect(self) -> str:
        """
        Exchange the OAuth token for the space's public token.
        """

        try:
            payload = self.get(f"spaces/{self._space_id}")
            envelope = SpaceEnvelope.model_validate(payload)
        except (StoryblokRequestError, ValidationError) as exc:
            raise StoryblokAuthError(
                "Could not retrieve the space token. Check the space id and the OAuth token.",
                status_code=getattr(exc, "status_code", None),
            ) from exc

        self._space_token = envelope.space.first_token
        log_event(logger, logging.INFO, "storyblok_connected", space_id=self._space_id)
        return self._space_token

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return self._call("GET", path, params=params)

    def post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._call("POST", path, json_body=body)

    def put(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._call("PUT", path, json_body=body)

    def _call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> dict[str, Any]:
        url, headers, query = self._route(path, params)
        try:
            payload = self._request_json(
                method=method,
                url=url,
                params=query,
                json_body=json_body,
                headers=headers,
            )
        except ConnectorRequestError as exc:
            error_cls = StoryblokNotFoundError if exc.status_code == 404 else StoryblokRequestError
            raise error_cls(str(exc), status_code=exc.status_code) from exc

        if not isinstance(payload, dict):
            raise StoryblokRequestError(f"storyblok: unexpected response shape for {method} {path}.")
        return payload

    def _route(
        self,
        path: str,
        params: dict[str, Any] | None,
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        clean_path = path.lstrip("/")
        query = dict(params or {})

        if clean_path.startswith(CDN_PREFIX):
            if not self._space_token:
                raise StoryblokRequestError("storyblok: CDN read attempted before connect().")
            query.setdefault("token", self._space_token)
            return f"{self._settings.cdn_base_url}/{clean_path}", {}, query

        headers = {"Authorization": self._oauth_token}
        return f"{self._settings.management_base_url}/{clean_path}", headers, query
