"""
logo_importer/connectors package marker.
"""

from logo_importer.connectors.base import ConnectorRequestError, HTTPConnector
from logo_importer.connectors.rate_limiter import HostRateLimiter
from logo_importer.connectors.storyblok import (
    StoryblokAuthError,
    StoryblokClient,
    StoryblokNotFoundError,
    StoryblokRequestError,
)

__all__ = [
    "ConnectorRequestError",
    "HTTPConnector",
    "HostRateLimiter",
    "StoryblokAuthError",
    "StoryblokClient",
    "StoryblokNotFoundError",
    "StoryblokRequestError",
]
