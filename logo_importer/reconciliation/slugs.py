"""
Slug derivation for remote entries.
"""

from __future__ import annotations

from slugify import slugify


def story_slug(name: str) -> str:
    """
    Lower-case ASCII slug with single hyphens, e.g. "Foo & Bar Co." -> "foo-bar-co".
    """

    slug = slugify(name or "", lowercase=True, separator="-")
    if not slug:
        raise ValueError(f"Cannot derive a slug from website name {name!r}.")
    return slug
