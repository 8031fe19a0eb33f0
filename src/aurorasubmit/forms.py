"""Per-content-type form handling.

Each builder validates one submission form and turns it into an
:class:`ItemDraft`: the canonical item ID plus every file to commit, with
its repository path and size limit. Sizes are only enforced when the
pull request is created.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from aurorasubmit.errors import ValidationError
from aurorasubmit.identifiers import (
    SCREENSHOT_EXTENSION,
    ContentType,
    content_path,
    derive_item_id,
)
from aurorasubmit.metadata import parse_coverflow_metadata, parse_xzp_metadata
from aurorasubmit.submission_queue import QueuedFile

if TYPE_CHECKING:
    from aurorasubmit.config import Settings


@dataclass
class UploadedFile:
    """A file picked in the form. Selected means named; empty files still count."""

    filename: str
    content: bytes

    def __bool__(self) -> bool:
        return bool(self.filename)


@dataclass
class SubmissionForm:
    """Raw form input. ``package`` is the skin or coverflow file."""

    type: str | None
    name: str = ""
    author: str = ""
    website: str = ""
    image: UploadedFile | None = None
    package: UploadedFile | None = None
    screenshot: UploadedFile | None = None


@dataclass
class ItemDraft:
    type: ContentType
    item_id: str
    name: str
    author: str
    files: list[QueuedFile] = field(default_factory=list)
    website: str | None = None
    metadata: dict[str, Any] | None = None


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def build_background(form: SubmissionForm, settings: "Settings") -> ItemDraft:
    name, author = _text(form.name), _text(form.author)
    if not name or not author or not form.image:
        raise ValidationError("Please fill all fields for the background.")

    item_id = derive_item_id(ContentType.BACKGROUND, author, name)
    return ItemDraft(
        type=ContentType.BACKGROUND,
        item_id=item_id,
        name=name,
        author=author,
        files=[
            QueuedFile(
                filename=form.image.filename,
                content=form.image.content,
                desired_path=content_path(ContentType.BACKGROUND, item_id),
                max_size=settings.max_background_size,
            )
        ],
    )


def build_skin(form: SubmissionForm, settings: "Settings") -> ItemDraft:
    website = _text(form.website)
    if not form.package or not form.screenshot or not website:
        raise ValidationError(
            "Please provide a valid skin file, a screenshot, a website, "
            "and ensure metadata is parsed."
        )

    metadata = parse_xzp_metadata(form.package.content)
    name, author = _text(metadata.get("skinname")), _text(metadata.get("author"))
    if not name or not author:
        raise ValidationError(
            "Please provide a valid skin file, a screenshot, a website, "
            "and ensure metadata is parsed."
        )

    item_id = derive_item_id(ContentType.SKIN, author, name)
    return ItemDraft(
        type=ContentType.SKIN,
        item_id=item_id,
        name=name,
        author=author,
        website=website,
        metadata=metadata,
        files=[
            QueuedFile(
                filename=form.package.filename,
                content=form.package.content,
                desired_path=content_path(ContentType.SKIN, item_id),
                max_size=settings.max_skin_size,
            ),
            QueuedFile(
                filename=form.screenshot.filename,
                content=form.screenshot.content,
                desired_path=content_path(ContentType.SKIN, item_id, SCREENSHOT_EXTENSION),
                max_size=settings.max_screenshot_size,
            ),
        ],
    )


def build_coverflow(form: SubmissionForm, settings: "Settings") -> ItemDraft:
    if not form.package or not form.screenshot:
        raise ValidationError("Please provide a valid coverflow file and a screenshot.")

    metadata = parse_coverflow_metadata(form.package.content)
    name, author = _text(metadata.get("name")), _text(metadata.get("author"))
    if not name or not author:
        raise ValidationError("Please provide a valid coverflow file and a screenshot.")

    item_id = derive_item_id(ContentType.COVERFLOW, author, name)
    return ItemDraft(
        type=ContentType.COVERFLOW,
        item_id=item_id,
        name=name,
        author=author,
        website=_text(form.website) or None,
        metadata=metadata,
        files=[
            QueuedFile(
                filename=form.package.filename,
                content=form.package.content,
                desired_path=content_path(ContentType.COVERFLOW, item_id),
                max_size=settings.max_coverflow_size,
            ),
            QueuedFile(
                filename=form.screenshot.filename,
                content=form.screenshot.content,
                desired_path=content_path(ContentType.COVERFLOW, item_id, SCREENSHOT_EXTENSION),
                max_size=settings.max_screenshot_size,
            ),
        ],
    )


_BUILDERS = {
    ContentType.BACKGROUND: build_background,
    ContentType.SKIN: build_skin,
    ContentType.COVERFLOW: build_coverflow,
}


def build_item(form: SubmissionForm, settings: "Settings") -> ItemDraft:
    """Validate ``form`` with the builder for its content type."""
    try:
        content_type = ContentType(_text(form.type).lower())
    except ValueError:
        raise ValidationError("Please select a content type.") from None
    return _BUILDERS[content_type](form, settings)
