"""
Logo extraction strategies, evaluated in priority order by LogoResolver.

Each strategy is a plain function `(ResolutionContext) -> LogoReference | None`.
`None` means "no candidate here, try the next one".
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from bs4 import BeautifulSoup, Tag

from logo_importer.domain import LogoReference
from logo_importer.logging_utils import log_event
from logo_importer.scraping.favicon import FaviconDiscoveryService
from logo_importer.scraping.fetcher import FetchError, PageFetcher
from logo_importer.scraping.urls import absolute_url

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ResolutionContext:
    """
    Inputs shared by every strategy for one site.

    `document` is None when the homepage could not be fetched.
    """

    base_url: str
    document: BeautifulSoup | None
    fetcher: PageFetcher
    favicon_service: FaviconDiscoveryService | None = None


Strategy = Callable[[ResolutionContext], LogoReference | None]


def parse_icon_width(sizes: object) -> int | None:
    """
    Width of the first `WxH` token, e.g. "192x192" -> 192; "any" -> None.
    """

    if not isinstance(sizes, str):
        return None
    tokens = sizes.strip().lower().split()
    if not tokens or "x" not in tokens[0]:
        return None
    try:
        return int(tokens[0].split("x", 1)[0])
    except ValueError:
        return None


def pick_largest(candidates: Sequence[T], sizes_of: Callable[[T], object]) -> T | None:
    """
    Candidate with the largest declared width; ties keep input order.

    Candidates without a usable size only win when no candidate has one.
    """

    if not candidates:
        return None

    best: T | None = None
    best_width: int | None = None
    for candidate in candidates:
        width = parse_icon_width(sizes_of(candidate))
        if width is None:
            continue
        if best_width is None or width > best_width:
            best, best_width = candidate, width
    return best if best is not None else candidates[0]


def _remote(reference: object, base_url: str) -> LogoReference | None:
    if not isinstance(reference, str):
        return None
    url = absolute_url(reference, base_url)
    return LogoReference.remote_url(url) if url else None


# ---------------------------------------------------------------------------
# 1. Web app manifest
# ---------------------------------------------------------------------------


def manifest_strategy(context: ResolutionContext) -> LogoReference | None:
    if context.document is None:
        return None

    link = context.document.find(attrs={"rel": "manifest"})
    if link is None:
        return None
    manifest_url = absolute_url(link.get("href"), context.base_url)
    if not manifest_url:
        return None

    try:
        manifest = context.fetcher.get_json(manifest_url)
    except FetchError as exc:
        log_event(
            logger,
            logging.DEBUG,
            "manifest_unavailable",
            base_url=context.base_url,
            manifest_url=manifest_url,
            error=str(exc),
        )
        return None

    icons = manifest.get("icons") if isinstance(manifest, dict) else None
    if not isinstance(icons, list):
        return None
    usable = [
        icon
        for icon in icons
        if isinstance(icon, dict) and isinstance(icon.get("src"), str) and icon["src"].strip()
    ]
    chosen = pick_largest(usable, lambda icon: icon.get("sizes"))
    if chosen is None:
        return None
    return _remote(chosen["src"], context.base_url)


# ---------------------------------------------------------------------------
# 2. schema.org structured data
# ---------------------------------------------------------------------------


def _structured_nodes(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return [node for node in data if isinstance(node, dict)]
    if not isinstance(data, dict):
        return []
    nodes = [data]
    graph = data.get("@graph")
    if isinstance(graph, list):
        nodes.extend(node for node in graph if isinstance(node, dict))
    return nodes


def _url_value(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    if isinstance(value, dict) and isinstance(value.get("url"), str) and value["url"].strip():
        return value["url"]
    return None


def _structured_logo(node: dict[str, Any]) -> str | None:
    logo = _url_value(node.get("logo"))
    if logo:
        return logo

    image = node.get("image")
    if isinstance(image, list):
        return _url_value(image[0]) if image else None
    return _url_value(image)


def structured_data_strategy(context: ResolutionContext) -> LogoReference | None:
    if context.document is None:
        return None

    blocks = context.document.find_all(
        "script",
        attrs={"type": lambda value: bool(value) and "application/ld+json" in value.lower()},
    )
    for index, block in enumerate(blocks):
        try:
            data = json.loads(block.get_text() or "")
        except ValueError:
            log_event(
                logger,
                logging.DEBUG,
                "structured_data_malformed",
                base_url=context.base_url,
                block_index=index,
            )
            continue

        for node in _structured_nodes(data):
            found = _remote(_structured_logo(node), context.base_url)
            if found:
                return found
    return None


# ---------------------------------------------------------------------------
# 3. Favicon discovery service
# ---------------------------------------------------------------------------


def favicon_strategy(context: ResolutionContext) -> LogoReference | None:
    if context.favicon_service is None:
        return None

    try:
        candidates = context.favicon_service.discover(context.base_url, context.document)
    except Exception as exc:
        log_event(
            logger,
            logging.DEBUG,
            "favicon_discovery_failed",
            base_url=context.base_url,
            error=str(exc),
        )
        return None

    chosen = pick_largest(list(candidates or []), lambda candidate: candidate.sizes)
    if chosen is None:
        return None
    return _remote(chosen.source, context.base_url)


# ---------------------------------------------------------------------------
# 4. Header markup heuristics
# ---------------------------------------------------------------------------


def _has_logo_class(node: Tag) -> bool:
    classes = node.get("class")
    if isinstance(classes, (list, tuple)):
        classes = " ".join(classes)
    return isinstance(classes, str) and "logo" in classes


def _logo_from_element(node: Tag, base_url: str) -> LogoReference | None:
    if node.name == "img":
        return _remote(node.get("src"), base_url)
    if node.name == "svg":
        return LogoReference.inline_markup(str(node))
    return None


def html_logo_strategy(context: ResolutionContext) -> LogoReference | None:
    if context.document is None:
        return None

    for node in context.document.select("header *"):
        if not _has_logo_class(node):
            continue

        found = _logo_from_element(node, context.base_url)
        if found is None and node.name not in {"img", "svg"}:
            fragment = BeautifulSoup(str(node), "html.parser")
            nested = fragment.select_one("img, svg")
            if nested is not None:
                found = _logo_from_element(nested, context.base_url)
        if found:
            return found
    return None


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    manifest_strategy,
    structured_data_strategy,
    favicon_strategy,
    html_logo_strategy,
)
