"""
logo_importer/domain/website.py

Website records and the canonical logo reference produced by resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LogoKind(str, Enum):
    """
    Representation carried by a LogoReference.
    """

    REMOTE_URL = "remote_url"
    INLINE_MARKUP = "inline_markup"
    ABSENT = "absent"


@dataclass(frozen=True)
class LogoReference:
    """
    One resolved logo: an absolute URL, inline SVG markup, or nothing.
    """

    kind: LogoKind = LogoKind.ABSENT
    value: str = ""

    def __post_init__(self) -> None:
        if self.kind is LogoKind.ABSENT and self.value:
            raise ValueError("An absent logo cannot carry a value.")
        if self.kind is not LogoKind.ABSENT and not self.value:
            raise ValueError(f"A {self.kind.value} logo requires a non-empty value.")

    @classmethod
    def remote_url(cls, url: str) -> "LogoReference":
        return cls(kind=LogoKind.REMOTE_URL, value=url)

    @classmethod
    def inline_markup(cls, markup: str) -> "LogoReference":
        return cls(kind=LogoKind.INLINE_MARKUP, value=markup)

    @classmethod
    def absent(cls) -> "LogoReference":
        return cls()

    @classmethod
    def from_legacy(cls, raw: str | None) -> "LogoReference":
        """
        Interpret a bare string logo, as stored by older cache snapshots.
        """

        text = (raw or "").strip()
        if not text:
            return cls.absent()
        if "<svg" in text:
            return cls.inline_markup(text)
        return cls.remote_url(text)

    @property
    def is_absent(self) -> bool:
        return self.kind is LogoKind.ABSENT

    @property
    def is_inline(self) -> bool:
        return self.kind is LogoKind.INLINE_MARKUP

    @property
    def is_remote(self) -> bool:
        return self.kind is LogoKind.REMOTE_URL

    def __bool__(self) -> bool:
        return not self.is_absent


@dataclass
class WebsiteRecord:
    """
    One website row; `logo` is filled in once by the batch scraper.
    """

    name: str
    url: str = ""
    logo: LogoReference = field(default_factory=LogoReference.absent)

    @property
    def has_url(self) -> bool:
        return bool(self.url.strip())
