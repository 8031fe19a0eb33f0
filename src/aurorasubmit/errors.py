# Error types raised by the submission workflow.
# Created: 2026-10-19

from __future__ import annotations


class SubmissionError(Exception):
    """Base class for every error surfaced to the contributor."""


class ConfigurationError(SubmissionError):
    """The OAuth app credentials are not configured."""


class MetadataError(SubmissionError, ValueError):
    """Embedded metadata could not be located or parsed."""


class ValidationError(SubmissionError):
    """Form input is incomplete or otherwise rejected."""


class DuplicateItemError(ValidationError):
    def __init__(self, item_id: str, queued: bool = False):
        self.item_id = item_id
        self.queued = queued
        where = "is already in the queue" if queued else "already exists"
        super().__init__(f"An item with ID '{item_id}' {where}.")


class FileTooLargeError(ValidationError):
    def __init__(self, filename: str, size: int, max_size: int, formatted_limit: str):
        self.filename = filename
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"File size for {filename} exceeds the maximum limit of {formatted_limit}."
        )


class AuthenticationError(SubmissionError):
    """Token exchange failed, or no valid token is available."""


class GitHubError(SubmissionError):
    """A GitHub REST call returned a non-success status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"GitHub API error {status_code}: {message}")


class PullRequestError(SubmissionError):
    """Any failure along the fork, branch, commit, pull request sequence."""
