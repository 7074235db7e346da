"""
tests/test_resolver.py

LogoResolver: strategy priority, early exit and homepage failure handling.
"""

from __future__ import annotations

import pytest

from conftest import FakeResponse
from logo_importer.domain import LogoReference
from logo_importer.scraping import FaviconCandidate, HTMLFaviconDiscovery, LogoResolver, PageFetcher

BASE = "https://x.com"

FULL_PAGE = """
<html>
  <head>
    <link rel="manifest" href="/manifest.json">
    <script type="application/ld+json">{"@type": "Organization", "logo": "/ld-logo.png"}</script>
  </head>
  <body>
    <header><img class="logo" src="/header-logo.png"></header>
  </body>
</html>
"""


class StubFavicons:
    def __init__(self, candidates=None) -> None:
        self.candidates = candidates or []
        self.calls: list[str] = []

    def discover(self, base_url: str, document=None) -> list[FaviconCandidate]:
        self.calls.append(base_url)
        return self.candidates


@pytest.fixture()
def fetcher(session, http_settings) -> PageFetcher:
    return PageFetcher(settings=http_settings, session=session)


@pytest.fixture()
def favicons() -> StubFavicons:
    return StubFavicons([FaviconCandidate(source=f"{BASE}/favicon.ico")])


# ---------------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------------


class TestPriority:
    def test_manifest_beats_every_other_source(self, session, fetcher, favicons) -> None:
        session.add(BASE, FakeResponse(text=FULL_PAGE))
        session.add(
            f"{BASE}/manifest.json",
            FakeResponse(json_data={"icons": [{"src": "/m-512.png", "sizes": "512x512"}]}),
        )
        resolver = LogoResolver(fetcher=fetcher, favicon_service=favicons)

        assert resolver.resolve(BASE) == LogoReference.remote_url(f"{BASE}/m-512.png")
        assert favicons.calls == []

    def test_structured_data_when_manifest_unavailable(self, session, fetcher, favicons) -> None:
        session.add(BASE, FakeResponse(text=FULL_PAGE))
        resolver = LogoResolver(fetcher=fetcher, favicon_service=favicons)

        assert resolver.resolve(BASE).value == f"{BASE}/ld-logo.png"
        assert favicons.calls == []

    def test_favicon_before_header_markup(self, session, fetcher, favicons) -> None:
        session.add(BASE, FakeResponse(text='<header><img class="logo" src="/h.png"></header>'))
        resolver = LogoResolver(fetcher=fetcher, favicon_service=favicons)

        assert resolver.resolve(BASE).value == f"{BASE}/favicon.ico"

    def test_header_markup_is_last_resort(self, session, fetcher) -> None:
        session.add(BASE, FakeResponse(text='<header><img class="logo" src="/h.png"></header>'))
        resolver = LogoResolver(fetcher=fetcher, favicon_service=StubFavicons())

        assert resolver.resolve(f"{BASE}/").value == f"{BASE}/h.png"

    def test_later_strategies_not_run_after_a_hit(self, session, fetcher) -> None:
        session.add(BASE, FakeResponse(text="<html></html>"))
        calls: list[str] = []

        def first(context):
            calls.append("first")
            return LogoReference.remote_url(f"{context.base_url}/first.png")

        def second(context):
            calls.append("second")
            return LogoReference.remote_url(f"{context.base_url}/second.png")

        resolver = LogoResolver(fetcher=fetcher, strategies=(first, second))
        assert resolver.resolve(BASE).value == f"{BASE}/first.png"
        assert calls == ["first"]

    def test_nothing_found_is_absent(self, session, fetcher) -> None:
        session.add(BASE, FakeResponse(text="<html><body>plain</body></html>"))
        resolver = LogoResolver(fetcher=fetcher, favicon_service=StubFavicons())
        assert resolver.resolve(BASE).is_absent

    def test_same_input_same_result(self, session, fetcher, favicons) -> None:
        session.add(BASE, FakeResponse(text=FULL_PAGE))
        resolver = LogoResolver(fetcher=fetcher, favicon_service=favicons)
        assert resolver.resolve(BASE) == resolver.resolve(BASE)


# ---------------------------------------------------------------------------
# Failure handling
# ---------------------------------------------------------------------------


class TestFailureHandling:
    def test_home_failure_still_tries_favicons(self, session, fetcher, favicons) -> None:
        session.add(BASE, FakeResponse(503))
        resolver = LogoResolver(fetcher=fetcher, favicon_service=favicons)

        assert resolver.resolve(BASE).value == f"{BASE}/favicon.ico"
        assert favicons.calls == [BASE]

    def test_home_failure_without_favicon_fallback(self, session, fetcher, favicons) -> None:
        session.add(BASE, FakeResponse(404))
        resolver = LogoResolver(
            fetcher=fetcher,
            favicon_service=favicons,
            favicon_on_home_failure=False,
        )

        assert resolver.resolve(BASE).is_absent
        assert favicons.calls == []

    def test_crashing_strategy_falls_through_to_next(self, session, fetcher) -> None:
        session.add(BASE, FakeResponse(text="<html></html>"))

        def broken(context):
            raise KeyError("unexpected")

        def fallback(context):
            return LogoReference.remote_url(f"{context.base_url}/fallback.png")

        resolver = LogoResolver(fetcher=fetcher, strategies=(broken, fallback))
        assert resolver.resolve(BASE).value == f"{BASE}/fallback.png"

    def test_malformed_manifest_href_falls_through(self, session, fetcher) -> None:
        page = (
            '<html><head><link rel="manifest" href="http://[broken/manifest.json"></head>'
            '<body><header><img class="logo" src="/logo.png"></header></body></html>'
        )
        session.add(BASE, FakeResponse(text=page))
        resolver = LogoResolver(fetcher=fetcher)

        assert resolver.resolve(BASE).value == f"{BASE}/logo.png"

    def test_home_failure_with_default_favicon_discovery(self, session, fetcher) -> None:
        session.add(BASE, FakeResponse(503))
        session.add(f"{BASE}/favicon.ico", FakeResponse(content=b"\x00\x00\x01\x00"))
        resolver = LogoResolver(fetcher=fetcher, favicon_service=HTMLFaviconDiscovery(fetcher=fetcher))

        assert resolver.resolve(BASE) == LogoReference.remote_url(f"{BASE}/favicon.ico")

    def test_blank_url_makes_no_request(self, session, fetcher) -> None:
        resolver = LogoResolver(fetcher=fetcher)
        assert resolver.resolve("   ").is_absent
        assert session.calls == []


# ---------------------------------------------------------------------------
# Network usage
# ---------------------------------------------------------------------------


class TestNetworkUsage:
    def test_homepage_fetched_once_through_favicon_stage(self, session, fetcher) -> None:
        page = '<html><head><link rel="icon" href="/icon-32.png" sizes="32x32"></head></html>'
        session.add(BASE, FakeResponse(text=page))
        resolver = LogoResolver(fetcher=fetcher, favicon_service=HTMLFaviconDiscovery(fetcher=fetcher))

        assert resolver.resolve(BASE).value == f"{BASE}/icon-32.png"
        assert len(session.calls_to(BASE)) == 1
