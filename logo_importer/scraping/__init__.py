"""
Logo scraping: URL helpers, fetch mechanics, strategies, resolver and batch driver.
"""

from logo_importer.scraping.batch import BatchCancelledError, BatchScraper
from logo_importer.scraping.favicon import (
    FaviconCandidate,
    FaviconDiscoveryService,
    HTMLFaviconDiscovery,
)
from logo_importer.scraping.fetcher import FetchError, PageFetcher
from logo_importer.scraping.resolver import LogoResolver
from logo_importer.scraping.strategies import DEFAULT_STRATEGIES, ResolutionContext

__all__ = [
    "BatchCancelledError",
    "BatchScraper",
    "DEFAULT_STRATEGIES",
    "FaviconCandidate",
    "FaviconDiscoveryService",
    "FetchError",
    "HTMLFaviconDiscovery",
    "LogoResolver",
    "PageFetcher",
    "ResolutionContext",
]
