# Canonical content identifiers and repository paths.
# Created: 2026-10-19

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_NOT_ALNUM = re.compile(r"[^a-z0-9]")

SCREENSHOT_EXTENSION = ".jpg"


class ContentType(str, Enum):
    BACKGROUND = "background"
    SKIN = "skin"
    COVERFLOW = "coverflow"


@dataclass(frozen=True)
class ContentLayout:
    """Where a content type lives in the repository and how its IDs look."""

    prefix: str
    directory: str
    payload_extension: str


LAYOUTS: dict[ContentType, ContentLayout] = {
    ContentType.BACKGROUND: ContentLayout("bg", "repo/backgrounds", ".jpg"),
    ContentType.SKIN: ContentLayout("skin", "repo/skins", ".xzp"),
    ContentType.COVERFLOW: ContentLayout("cf", "repo/coverflows", ".cfljson"),
}


def sanitize(value: str) -> str:
    """Lowercase and drop everything outside ``[a-z0-9]``."""
    return _NOT_ALNUM.sub("", value.lower())


def derive_item_id(content_type: ContentType, author: str, name: str) -> str:
    """``<prefix>.<author>.<name>``, e.g. ``skin.someone.neonblue``."""
    layout = LAYOUTS[ContentType(content_type)]
    return f"{layout.prefix}.{sanitize(author)}.{sanitize(name)}"


def content_path(content_type: ContentType, item_id: str, extension: str | None = None) -> str:
    """Repository path for one of an item's files."""
    layout = LAYOUTS[ContentType(content_type)]
    return f"{layout.directory}/{item_id}{extension or layout.payload_extension}"
