"""
logo_importer/schemas/cache.py

On-disk schemas for the enriched-record cache and the failure log.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, RootModel

from logo_importer.domain import FailureLogEntry, LogoKind, LogoReference, WebsiteRecord


class LogoPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    kind: LogoKind
    value: str = ""

    def to_reference(self) -> LogoReference:
        if self.kind is LogoKind.ABSENT or not self.value:
            return LogoReference.absent()
        return LogoReference(kind=self.kind, value=self.value)


class WebsiteRecordPayload(BaseModel):
    """
    One cached website. `logo` also accepts the bare-string form of older snapshots.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    url: str = ""
    logo: LogoPayload | str | None = None

    def to_record(self) -> WebsiteRecord:
        if isinstance(self.logo, LogoPayload):
            logo = self.logo.to_reference()
        else:
            logo = LogoReference.from_legacy(self.logo)
        return WebsiteRecord(name=self.name, url=self.url, logo=logo)

    @classmethod
    def from_record(cls, record: WebsiteRecord) -> "WebsiteRecordPayload":
        return cls(
            name=record.name,
            url=record.url,
            logo=LogoPayload(kind=record.logo.kind, value=record.logo.value),
        )


class CacheSnapshotPayload(RootModel[list[WebsiteRecordPayload]]):
    def to_records(self) -> list[WebsiteRecord]:
        return [item.to_record() for item in self.root]

    @classmethod
    def from_records(cls, records: list[WebsiteRecord]) -> "CacheSnapshotPayload":
        return cls([WebsiteRecordPayload.from_record(record) for record in records])


class FailureLogEntryPayload(BaseModel):
    website_name: str
    message: str

    @classmethod
    def from_entry(cls, entry: FailureLogEntry) -> "FailureLogEntryPayload":
        return cls(website_name=entry.website_name, message=entry.message)


class FailureLogPayload(RootModel[list[FailureLogEntryPayload]]):
    @classmethod
    def from_entries(cls, entries: list[FailureLogEntry]) -> "FailureLogPayload":
        return cls([FailureLogEntryPayload.from_entry(entry) for entry in entries])
