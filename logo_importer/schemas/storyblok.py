"""
logo_importer/schemas/storyblok.py

Response schemas for the Storyblok endpoints the importer consumes.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SpaceInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    first_token: str = Field(min_length=1)


class SpaceEnvelope(BaseModel):
    """
    `GET spaces/{space_id}` response.
    """

    model_config = ConfigDict(extra="ignore")

    space: SpaceInfo


class StoryEnvelope(BaseModel):
    """
    Any response wrapping a single story.
    """

    model_config = ConfigDict(extra="ignore")

    story: dict[str, Any]


class UploadTicket(BaseModel):
    """
    Signed upload credentials returned by `POST spaces/{space_id}/assets`.

    Single use: `fields` must be posted verbatim with the file to `post_url`,
    after which the asset is addressable as `id` / `pretty_url`.
    """

    model_config = ConfigDict(extra="ignore")

    id: int | str
    pretty_url: str = Field(min_length=1)
    post_url: str = Field(min_length=1)
    fields: dict[str, Any] = Field(default_factory=dict)

    def form_fields(self) -> dict[str, str]:
        return {key: str(value) for key, value in self.fields.items()}
