"""Metadata extraction for uploaded skin and coverflow files.

Skin packages (``.xzp``) are opaque binaries with a JSON object embedded
somewhere inside them; the object always starts with ``{"metaver"``.
Coverflow bundles (``.cfljson``) are plain JSON documents whose ``info``
object carries the display fields.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from aurorasubmit.errors import MetadataError

logger = logging.getLogger(__name__)

XZP_METADATA_MARKER = '{"metaver"'

NOT_AVAILABLE = "N/A"

_SKIN_FIELDS = (
    ("Skin Name", "skinname"),
    ("Author", "author"),
    ("Skin Version", "revision"),
    ("Aurora Version", "auroraver"),
    ("Description", "description"),
)

_COVERFLOW_FIELDS = (
    ("Name", "name"),
    ("Author", "author"),
    ("Version", "version"),
)

_COVERFLOW_REQUIRED = ("name", "author", "version")


def extract_json_block(text: str, start: int) -> str | None:
    """Return the brace-balanced block beginning at ``text[start]``.

    Every ``{`` and ``}`` counts, including ones inside JSON strings.
    Returns None when the braces never balance.
    """
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        if depth == 0:
            return text[start : index + 1]
    return None


def parse_xzp_metadata(data: bytes) -> dict[str, Any]:
    """Locate and parse the JSON metadata block embedded in a skin package."""
    # latin-1 maps every byte to exactly one character, so binary noise
    # around the block never fails to decode.
    text = data.decode("iso-8859-1")

    start = text.find(XZP_METADATA_MARKER)
    if start == -1:
        raise MetadataError("Could not find metadata block in skin file.")

    block = extract_json_block(text, start)
    if block is None:
        raise MetadataError("Could not find the end of the metadata block.")

    try:
        metadata = json.loads(block)
    except json.JSONDecodeError as exc:
        raise MetadataError("Failed to parse extracted JSON metadata.") from exc
    if not isinstance(metadata, dict):
        raise MetadataError("Failed to parse extracted JSON metadata.")

    logger.debug("Extracted %d metadata fields from skin package", len(metadata))
    return metadata


def parse_coverflow_metadata(data: bytes) -> dict[str, Any]:
    """Parse a coverflow bundle and return its ``info`` object."""
    try:
        document = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MetadataError("Failed to parse coverflow JSON metadata.") from exc

    info = document.get("info") if isinstance(document, dict) else None
    if not isinstance(info, dict) or not all(key in info for key in _COVERFLOW_REQUIRED):
        raise MetadataError(
            'Coverflow file must be a valid JSON with "info" object containing '
            '"name", "author", and "version".'
        )
    return info


def _describe(metadata: dict[str, Any], fields: tuple[tuple[str, str], ...]) -> list[tuple[str, str]]:
    pairs = []
    for label, key in fields:
        value = metadata.get(key)
        pairs.append((label, str(value) if value not in (None, "") else NOT_AVAILABLE))
    return pairs


def describe_skin_metadata(metadata: dict[str, Any]) -> list[tuple[str, str]]:
    """Display pairs shown to the contributor after a skin file is analyzed."""
    return _describe(metadata, _SKIN_FIELDS)


def describe_coverflow_metadata(metadata: dict[str, Any]) -> list[tuple[str, str]]:
    """Display pairs shown to the contributor after a coverflow file is analyzed."""
    return _describe(metadata, _COVERFLOW_FIELDS)
