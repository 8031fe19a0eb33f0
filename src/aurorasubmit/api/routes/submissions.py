"""Submissions - FastAPI API router.

Provides REST endpoints for:
  /api/metadata/*           - analyze an uploaded skin or coverflow file
  /api/queue                - list, add and remove queued items
  /api/pull-request         - open one pull request for the whole queue
  /api/manifest/refresh     - re-fetch the published content list
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from aurorasubmit.api.deps import get_session, require_auth
from aurorasubmit.api.schemas import (
    ManifestResponse,
    MetadataField,
    MetadataResponse,
    PullRequestResponse,
    QueueItemInfo,
    QueueResponse,
    SessionResponse,
    StatusKind,
)
from aurorasubmit.errors import MetadataError
from aurorasubmit.forms import SubmissionForm, UploadedFile
from aurorasubmit.metadata import (
    describe_coverflow_metadata,
    describe_skin_metadata,
    parse_coverflow_metadata,
    parse_xzp_metadata,
)
from aurorasubmit.session import SubmissionSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Submissions"])

METADATA_READY = "Metadata extracted successfully! Fill remaining fields and add to queue."


async def _read_upload(upload: UploadFile | None, kind: str) -> UploadedFile | None:
    if upload is None or not upload.filename:
        return None
    try:
        content = await upload.read()
    except OSError as e:
        raise MetadataError(f"Failed to read {kind} file.") from e
    return UploadedFile(filename=upload.filename, content=content)


def _queue_items(session: SubmissionSession) -> list[QueueItemInfo]:
    return [QueueItemInfo(**item.to_dict()) for item in session.queue]


# ─── Session ──────────────────────────────────────────────────────────────


@router.get("/", response_model=SessionResponse)
@router.get("/api/session", response_model=SessionResponse)
async def get_session_state(session: SubmissionSession = Depends(get_session)):
    """Login state, manifest size and the current queue."""
    return SessionResponse(
        authenticated=session.is_authenticated,
        login=session.user_login,
        manifest_entries=len(session.manifest),
        queue=_queue_items(session),
    )


# ─── Metadata ─────────────────────────────────────────────────────────────


@router.post("/api/metadata/skin", response_model=MetadataResponse)
async def analyze_skin(file: UploadFile = File(...)):
    """Extract the embedded metadata block from a skin package."""
    upload = await _read_upload(file, "skin")
    if upload is None:
        raise MetadataError("Failed to read skin file.")
    metadata = parse_xzp_metadata(upload.content)
    return MetadataResponse(
        message=METADATA_READY,
        metadata=metadata,
        display=[MetadataField(label=k, value=v) for k, v in describe_skin_metadata(metadata)],
    )


@router.post("/api/metadata/coverflow", response_model=MetadataResponse)
async def analyze_coverflow(file: UploadFile = File(...)):
    """Validate a coverflow bundle and return its ``info`` block."""
    upload = await _read_upload(file, "coverflow")
    if upload is None:
        raise MetadataError("Failed to read coverflow file.")
    metadata = parse_coverflow_metadata(upload.content)
    return MetadataResponse(
        message=METADATA_READY,
        metadata=metadata,
        display=[
            MetadataField(label=k, value=v) for k, v in describe_coverflow_metadata(metadata)
        ],
    )


# ─── Queue ────────────────────────────────────────────────────────────────


@router.get("/api/queue", response_model=QueueResponse)
async def list_queue(session: SubmissionSession = Depends(require_auth)):
    return QueueResponse(status=StatusKind.INFO, items=_queue_items(session))


@router.post("/api/queue", response_model=QueueResponse)
async def add_to_queue(
    type: str = Form(""),
    name: str = Form(""),
    author: str = Form(""),
    website: str = Form(""),
    image: UploadFile | None = File(None),
    package: UploadFile | None = File(None),
    screenshot: UploadFile | None = File(None),
    session: SubmissionSession = Depends(require_auth),
):
    """Validate one submission form and append it to the queue."""
    form = SubmissionForm(
        type=type,
        name=name,
        author=author,
        website=website,
        image=await _read_upload(image, "image"),
        package=await _read_upload(package, type or "content"),
        screenshot=await _read_upload(screenshot, "screenshot"),
    )
    item = session.add_item(form)
    return QueueResponse(message=f'Added "{item.name}" to the queue.', items=_queue_items(session))


@router.delete("/api/queue/{queue_id}", response_model=QueueResponse)
async def remove_from_queue(queue_id: int, session: SubmissionSession = Depends(require_auth)):
    removed = session.remove_item(queue_id)
    message = "Removed item from the queue." if removed else "Item was not in the queue."
    return QueueResponse(
        status=StatusKind.SUCCESS if removed else StatusKind.INFO,
        message=message,
        items=_queue_items(session),
    )


# ─── Pull request ─────────────────────────────────────────────────────────


@router.post("/api/pull-request", response_model=PullRequestResponse)
async def open_pull_request(session: SubmissionSession = Depends(require_auth)):
    """Fork, branch, commit every queued file and open the pull request."""
    result = await session.create_pull_request()
    return PullRequestResponse(message="Pull Request created successfully!", **result)


@router.post("/api/manifest/refresh", response_model=ManifestResponse)
async def refresh_manifest(session: SubmissionSession = Depends(require_auth)):
    manifest = await session.refresh_manifest()
    return ManifestResponse(
        message=f"Loaded {len(manifest)} published items.", entries=len(manifest)
    )
