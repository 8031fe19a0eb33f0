"""Batch pull request creation.

Every queued file is committed to a fresh branch on the contributor's fork
of the content repository, then one pull request is opened upstream. The
steps run strictly in order and nothing is rolled back when one fails.
"""

from __future__ import annotations

import base64
import logging
from datetime import UTC, datetime
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from aurorasubmit.errors import FileTooLargeError, PullRequestError, ValidationError

if TYPE_CHECKING:
    from aurorasubmit.config import Settings
    from aurorasubmit.github.client import GitHubClient
    from aurorasubmit.submission_queue import QueuedFile, SubmissionItem, SubmissionQueue

logger = logging.getLogger(__name__)

BRANCH_PREFIX = "add/submission-batch-"

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size: int) -> str:
    """Human readable size, e.g. ``1.5 MB``."""
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = f"{size / 1024**exponent:.2f}".rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[exponent]}"


def validate_file_sizes(files: list["QueuedFile"]) -> None:
    for queued in files:
        if queued.size > queued.max_size:
            raise FileTooLargeError(
                queued.filename, queued.size, queued.max_size, format_file_size(queued.max_size)
            )


def build_branch_name(now: datetime | None = None) -> str:
    """``add/submission-batch-20250102T030405678Z`` from the UTC time."""
    now = (now or datetime.now(UTC)).astimezone(UTC)
    stamp = now.strftime("%Y%m%dT%H%M%S") + f"{now.microsecond // 1000:03d}Z"
    return f"{BRANCH_PREFIX}{stamp}"


def build_pr_title(items: Iterable["SubmissionItem"]) -> str:
    return "Batch Submission: " + ", ".join(item.name for item in items)


def build_pr_body(items: Iterable["SubmissionItem"]) -> str:
    lines = [f"*   **{item.name}** by {item.author} ({item.type.value})" for item in items]
    return "This PR includes the following submissions:\n\n" + "\n".join(lines)


async def _open_pull_request(
    client: "GitHubClient",
    items: list["SubmissionItem"],
    settings: "Settings",
    branch: str,
) -> dict[str, Any]:
    owner, repo = settings.github_repo_owner, settings.github_repo_name

    fork = await client.create_fork(owner, repo)
    fork_owner = fork["owner"]["login"]

    upstream = await client.get_repo(owner, repo)
    default_branch = upstream["default_branch"]

    base_ref = await client.get_ref(fork_owner, repo, f"heads/{default_branch}")
    base_sha = base_ref["object"]["sha"]

    await client.create_ref(fork_owner, repo, f"refs/heads/{branch}", base_sha)
    logger.info("Created branch %s on %s/%s at %s", branch, fork_owner, repo, base_sha[:7])

    for item in items:
        for queued in item.files:
            await client.create_or_update_file(
                fork_owner,
                repo,
                queued.desired_path,
                f"Add {queued.filename}",
                base64.b64encode(queued.content).decode("ascii"),
                branch,
            )
            logger.info("Committed %s", queued.desired_path)

    return await client.create_pull(
        owner,
        repo,
        title=build_pr_title(items),
        body=build_pr_body(items),
        head=f"{fork_owner}:{branch}",
        base=settings.github_target_branch,
    )


async def create_pull_request(
    client: "GitHubClient",
    queue: "SubmissionQueue",
    settings: "Settings",
    now: datetime | None = None,
) -> dict[str, Any]:
    """Open one pull request containing every queued file.

    The queue is read once up front and left untouched. The result lists
    the queue ids that went into the pull request under ``submitted``;
    removing them on success is up to the caller.
    """
    items = queue.items
    if not items:
        raise ValidationError("Submission queue is empty. Please add files first.")

    validate_file_sizes([f for item in items for f in item.files])

    branch = build_branch_name(now)
    try:
        pull = await _open_pull_request(client, items, settings, branch)
    except Exception as exc:
        logger.error("Pull request creation failed on branch %s: %s", branch, exc)
        raise PullRequestError(f"Error creating Pull Request: {exc}") from exc

    logger.info("Opened pull request %s", pull.get("html_url"))
    return {
        "url": pull.get("html_url"),
        "number": pull.get("number"),
        "branch": branch,
        "submitted": [item.id for item in items],
    }
