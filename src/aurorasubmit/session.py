"""Single-user submission session.

Holds everything the web surface needs between requests: the GitHub
client for the logged-in contributor, the manifest used for duplicate
checks, and the local submission queue.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from aurorasubmit.config import Settings
from aurorasubmit.errors import AuthenticationError, DuplicateItemError, GitHubError
from aurorasubmit.forms import SubmissionForm, build_item
from aurorasubmit.github.client import GitHubClient
from aurorasubmit.github.oauth import TokenStore, exchange_code
from aurorasubmit.manifest import ContentManifest, ensure_unique, fetch_manifest
from aurorasubmit.pull_request import create_pull_request
from aurorasubmit.submission_queue import SubmissionItem, SubmissionQueue

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, Settings], GitHubClient]


class SubmissionSession:
    def __init__(
        self,
        settings: Settings,
        token_store: TokenStore,
        client_factory: ClientFactory = GitHubClient,
        oauth_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self.token_store = token_store
        self.queue = SubmissionQueue()
        self.manifest = ContentManifest()
        self.client: GitHubClient | None = None
        self.user_login: str | None = None
        self._client_factory = client_factory
        self.oauth_transport = oauth_transport

    @property
    def is_authenticated(self) -> bool:
        return self.client is not None

    def require_client(self) -> GitHubClient:
        if self.client is None:
            raise AuthenticationError("Not authenticated with GitHub.")
        return self.client

    # ─── Authentication ──────────────────────────────────────────────────

    async def check_auth(self) -> bool:
        """Resume with the stored token, discarding it if GitHub rejects it."""
        token = self.token_store.load()
        if not token:
            return False

        client = self._client_factory(token, self.settings)
        try:
            user = await client.get_authenticated_user()
        except (GitHubError, httpx.HTTPError) as exc:
            logger.error("Invalid GitHub token: %s", exc)
            await client.aclose()
            self.token_store.clear()
            return False

        await self._activate(client, user)
        return True

    async def complete_login(self, code: str | None) -> str | None:
        """Finish the OAuth redirect and return the contributor's login."""
        token = await exchange_code(code, self.settings, transport=self.oauth_transport)

        client = self._client_factory(token, self.settings)
        try:
            user = await client.get_authenticated_user()
        except (GitHubError, httpx.HTTPError) as exc:
            await client.aclose()
            raise AuthenticationError(f"GitHub rejected the new token: {exc}") from exc

        self.token_store.save(token)
        await self._activate(client, user)
        return self.user_login

    async def _activate(self, client: GitHubClient, user: dict[str, Any]) -> None:
        if self.client is not None and self.client is not client:
            await self.client.aclose()
        self.client = client
        self.user_login = user.get("login")
        logger.info("Authenticated with GitHub as %s", self.user_login)
        await self.refresh_manifest()

    async def logout(self) -> None:
        self.token_store.clear()
        await self.close()
        self.user_login = None
        self.manifest = ContentManifest()

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    # ─── Submissions ─────────────────────────────────────────────────────

    async def refresh_manifest(self) -> ContentManifest:
        self.manifest = await fetch_manifest(self.require_client(), self.settings)
        return self.manifest

    def add_item(self, form: SubmissionForm) -> SubmissionItem:
        self.require_client()
        draft = build_item(form, self.settings)
        ensure_unique(self.manifest, draft.item_id)
        if self.queue.has_item_id(draft.item_id):
            raise DuplicateItemError(draft.item_id, queued=True)

        item = self.queue.add(
            type=draft.type,
            item_id=draft.item_id,
            name=draft.name,
            author=draft.author,
            files=draft.files,
            website=draft.website,
            metadata=draft.metadata,
        )
        logger.info("Queued %s as %s", item.summary(), item.item_id)
        return item

    def remove_item(self, queue_id: int) -> bool:
        return self.queue.remove(queue_id)

    async def create_pull_request(self) -> dict[str, Any]:
        result = await create_pull_request(self.require_client(), self.queue, self.settings)
        for queue_id in result["submitted"]:
            self.queue.remove(queue_id)
        return result
