"""Published content manifest (``repo/list.json``) and duplicate detection."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import httpx

from aurorasubmit.errors import DuplicateItemError, GitHubError

if TYPE_CHECKING:
    from aurorasubmit.config import Settings
    from aurorasubmit.github.client import GitHubClient

logger = logging.getLogger(__name__)

MANIFEST_SECTIONS = ("backgrounds", "coverflows", "skins")


class ContentManifest:
    """Flat view over every entry in the manifest's sections."""

    def __init__(self, items: Iterable[Any] = ()):
        self.items: list[Any] = list(items)

    @classmethod
    def from_document(cls, document: Any) -> "ContentManifest":
        if not isinstance(document, dict) or not all(
            isinstance(document.get(section), list) for section in MANIFEST_SECTIONS
        ):
            logger.warning(
                "Parsed manifest is not in the expected object format. Defaulting to empty list."
            )
            return cls()

        items: list[Any] = []
        for section in MANIFEST_SECTIONS:
            items.extend(document[section])
        return cls(items)

    def contains(self, item_id: str) -> bool:
        return any(isinstance(entry, dict) and entry.get("id") == item_id for entry in self.items)

    def __len__(self) -> int:
        return len(self.items)


def ensure_unique(manifest: ContentManifest, item_id: str) -> None:
    if manifest.contains(item_id):
        raise DuplicateItemError(item_id)


async def fetch_manifest(client: "GitHubClient", settings: "Settings") -> ContentManifest:
    """Download and parse the upstream manifest.

    A missing or malformed manifest is treated as empty, so submissions
    can still be queued against a fresh repository.
    """
    try:
        data = await client.get_content(
            settings.github_repo_owner, settings.github_repo_name, settings.manifest_path
        )
        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, str):
            logger.warning("Manifest %s has no inline content", settings.manifest_path)
            return ContentManifest()
        document = json.loads(base64.b64decode(content))
    except (GitHubError, httpx.HTTPError, binascii.Error, ValueError) as exc:
        logger.warning(
            "Could not fetch or parse %s. Assuming it does not exist or is invalid: %s",
            settings.manifest_path,
            exc,
        )
        return ContentManifest()

    manifest = ContentManifest.from_document(document)
    if len(manifest):
        logger.info("Fetched content manifest with %d entries", len(manifest))
    return manifest
