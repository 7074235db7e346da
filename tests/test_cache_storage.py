"""
tests/test_cache_storage.py

JSON snapshot and failure log stores.
"""

from __future__ import annotations

import json

from logo_importer.domain import FailureLogEntry, LogoKind, LogoReference, WebsiteRecord
from logo_importer.storage import JsonCacheStore, JsonFailureLogStore


def test_missing_cache_loads_empty(tmp_path) -> None:
    assert JsonCacheStore(tmp_path / "cache.json").load() == []


def test_corrupted_cache_loads_empty(tmp_path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("[{not json", encoding="utf-8")
    assert JsonCacheStore(path).load() == []


def test_non_utf8_cache_loads_empty(tmp_path) -> None:
    path = tmp_path / "cache.json"
    path.write_bytes(b"[{\"name\": \"\xff\"}]")
    assert JsonCacheStore(path).load() == []


def test_saved_snapshot_keeps_logo_kinds(tmp_path) -> None:
    store = JsonCacheStore(tmp_path / "nested" / "cache.json")
    records = [
        WebsiteRecord(name="A", url="https://a.com", logo=LogoReference.remote_url("https://a.com/a.png")),
        WebsiteRecord(name="B", url="https://b.com", logo=LogoReference.inline_markup("<svg/>")),
        WebsiteRecord(name="C"),
    ]
    store.save(records)

    raw = json.loads(store.path.read_text(encoding="utf-8"))
    assert [item["logo"]["kind"] for item in raw] == ["remote_url", "inline_markup", "absent"]
    assert store.load() == records


def test_legacy_string_logos_are_understood(tmp_path) -> None:
    path = tmp_path / "cache.json"
    path.write_text(
        json.dumps(
            [
                {"name": "A", "url": "https://a.com", "logo": "https://a.com/logo.png"},
                {"name": "B", "url": "https://b.com", "logo": "<svg viewBox='0 0 1 1'></svg>"},
                {"name": "C", "url": "https://c.com", "logo": ""},
                {"name": "D", "url": "https://d.com"},
            ]
        ),
        encoding="utf-8",
    )

    kinds = [record.logo.kind for record in JsonCacheStore(path).load()]
    assert kinds == [LogoKind.REMOTE_URL, LogoKind.INLINE_MARKUP, LogoKind.ABSENT, LogoKind.ABSENT]


def test_save_leaves_no_temp_files(tmp_path) -> None:
    store = JsonCacheStore(tmp_path / "cache.json")
    store.save([WebsiteRecord(name="A")])
    store.save([WebsiteRecord(name="B")])

    assert sorted(path.name for path in tmp_path.iterdir()) == ["cache.json"]
    assert [record.name for record in store.load()] == ["B"]


def test_failure_log_is_a_list_of_entries(tmp_path) -> None:
    store = JsonFailureLogStore(tmp_path / "log.json")
    store.write([FailureLogEntry(website_name="Broken", message="StoryblokRequestError: boom")])

    assert json.loads(store.path.read_text(encoding="utf-8")) == [
        {"website_name": "Broken", "message": "StoryblokRequestError: boom"}
    ]


def test_empty_failure_log_is_written(tmp_path) -> None:
    store = JsonFailureLogStore(tmp_path / "log.json")
    store.write([])
    assert json.loads(store.path.read_text(encoding="utf-8")) == []
