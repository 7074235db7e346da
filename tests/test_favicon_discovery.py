"""
tests/test_favicon_discovery.py
"""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from conftest import FakeResponse
from logo_importer.scraping import FaviconCandidate, HTMLFaviconDiscovery, PageFetcher

BASE = "https://x.com"

PAGE = """
<html><head>
  <link rel="icon" href="/favicon-32.png" sizes="32x32">
  <link rel="apple-touch-icon" href="/apple.png" sizes="180x180">
  <link rel="stylesheet" href="/site.css">
  <link rel="shortcut icon" href="/favicon-32.png">
  <link rel="mask-icon" href="data:image/svg+xml;base64,AAAA">
</head></html>
"""


@pytest.fixture()
def fetcher(session, http_settings) -> PageFetcher:
    return PageFetcher(settings=http_settings, session=session)


def test_collects_declared_icons(session, fetcher) -> None:
    session.add(BASE, FakeResponse(text=PAGE))

    candidates = HTMLFaviconDiscovery(fetcher=fetcher).discover(f"{BASE}/")

    assert candidates == [
        FaviconCandidate(source=f"{BASE}/favicon-32.png", sizes="32x32"),
        FaviconCandidate(source=f"{BASE}/apple.png", sizes="180x180"),
    ]


def test_default_favicon_is_checked(session, fetcher) -> None:
    session.add(BASE, FakeResponse(text="<html></html>"))
    session.add(f"{BASE}/favicon.ico", FakeResponse(content=b"\x00\x00\x01\x00"))

    candidates = HTMLFaviconDiscovery(fetcher=fetcher).discover(BASE)

    assert candidates == [FaviconCandidate(source=f"{BASE}/favicon.ico")]


def test_missing_default_favicon_is_not_reported(session, fetcher) -> None:
    session.add(BASE, FakeResponse(text="<html></html>"))
    assert HTMLFaviconDiscovery(fetcher=fetcher).discover(BASE) == []


def test_default_icon_check_can_be_disabled(session, fetcher) -> None:
    session.add(BASE, FakeResponse(text="<html></html>"))

    assert HTMLFaviconDiscovery(fetcher=fetcher, check_default_icon=False).discover(BASE) == []
    assert session.calls_to(f"{BASE}/favicon.ico") == []


def test_unreachable_page_still_checks_default_icon(session, fetcher) -> None:
    session.add(BASE, FakeResponse(503))
    session.add(f"{BASE}/favicon.ico", FakeResponse(content=b"\x00\x00\x01\x00"))

    candidates = HTMLFaviconDiscovery(fetcher=fetcher).discover(BASE)

    assert candidates == [FaviconCandidate(source=f"{BASE}/favicon.ico")]


def test_unreachable_page_without_default_icon(fetcher) -> None:
    assert HTMLFaviconDiscovery(fetcher=fetcher).discover(BASE) == []


def test_parsed_document_is_not_fetched_again(session, fetcher) -> None:
    document = BeautifulSoup(PAGE, "html.parser")

    candidates = HTMLFaviconDiscovery(fetcher=fetcher, check_default_icon=False).discover(BASE, document)

    assert [candidate.sizes for candidate in candidates] == ["32x32", "180x180"]
    assert session.calls_to(BASE) == []
