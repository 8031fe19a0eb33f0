"""Thin async client for the GitHub REST endpoints the submission flow uses."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from aurorasubmit.config import Settings
from aurorasubmit.errors import GitHubError

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github+json"


class GitHubClient:
    """REST client authenticated with a user's OAuth token."""

    def __init__(
        self,
        token: str,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=settings.github_api_url,
            timeout=httpx.Timeout(settings.request_timeout),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": GITHUB_ACCEPT,
                "X-GitHub-Api-Version": "2022-11-28",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text[:200] or response.reason_phrase
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.reason_phrase

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, url, **kwargs)
        if response.is_error:
            message = self._error_message(response)
            logger.debug("GitHub %s %s -> %s: %s", method, url, response.status_code, message)
            raise GitHubError(response.status_code, message)
        if not response.content:
            return {}
        return response.json()

    # ─── Users ───────────────────────────────────────────────────────────

    async def get_authenticated_user(self) -> dict[str, Any]:
        return await self._request("GET", "/user")

    # ─── Repositories ────────────────────────────────────────────────────

    async def get_repo(self, owner: str, repo: str) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{owner}/{repo}")

    async def create_fork(self, owner: str, repo: str) -> dict[str, Any]:
        """Fork ``owner/repo`` into the authenticated account.

        GitHub returns the existing fork when one is already present.
        """
        return await self._request("POST", f"/repos/{owner}/{repo}/forks")

    async def get_content(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> dict[str, Any]:
        params = {"ref": ref} if ref else None
        return await self._request("GET", f"/repos/{owner}/{repo}/contents/{path}", params=params)

    async def create_or_update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        content: str,
        branch: str,
    ) -> dict[str, Any]:
        """Commit one base64-encoded file to ``branch``."""
        payload = {"message": message, "content": content, "branch": branch}
        return await self._request("PUT", f"/repos/{owner}/{repo}/contents/{path}", json=payload)

    # ─── Git refs ────────────────────────────────────────────────────────

    async def get_ref(self, owner: str, repo: str, ref: str) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{owner}/{repo}/git/ref/{ref}")

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"/repos/{owner}/{repo}/git/refs", json={"ref": ref, "sha": sha}
        )

    # ─── Pull requests ───────────────────────────────────────────────────

    async def create_pull(
        self, owner: str, repo: str, title: str, body: str, head: str, base: str
    ) -> dict[str, Any]:
        payload = {"title": title, "body": body, "head": head, "base": base}
        return await self._request("POST", f"/repos/{owner}/{repo}/pulls", json=payload)
