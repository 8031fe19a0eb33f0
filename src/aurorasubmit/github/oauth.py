# GitHub OAuth web flow - authorize URL, code exchange, local token storage.
# Created: 2026-10-19

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlencode

import httpx

from aurorasubmit.config import Settings, _chmod_safe
from aurorasubmit.errors import AuthenticationError, ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


def build_authorize_url(settings: Settings) -> str:
    """URL the contributor is sent to in order to grant access."""
    if not settings.github_client_id:
        raise ConfigurationError(
            "GitHub client ID is not set. "
            "Set AURORASUBMIT_GITHUB_CLIENT_ID in the environment or .env file."
        )
    query = urlencode(
        {
            "client_id": settings.github_client_id,
            "redirect_uri": settings.callback_url,
            "scope": settings.github_scope,
        }
    )
    return f"{settings.github_oauth_url}/authorize?{query}"


async def exchange_code(
    code: str | None,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Trade an authorization code for an access token."""
    if not code:
        raise ValidationError("Authorization code is missing")
    if not settings.github_client_id or not settings.github_client_secret:
        raise ConfigurationError("Server configuration error: GitHub credentials not set.")

    try:
        async with httpx.AsyncClient(
            timeout=settings.request_timeout, transport=transport
        ) as client:
            resp = await client.post(
                f"{settings.github_oauth_url}/access_token",
                headers={"Accept": "application/json"},
                json={
                    "client_id": settings.github_client_id,
                    "client_secret": settings.github_client_secret,
                    "code": code,
                },
            )
    except httpx.HTTPError as exc:
        logger.error("GitHub token exchange request failed: %s", exc)
        raise AuthenticationError(str(exc)) from exc

    if resp.is_error:
        logger.error("GitHub token exchange failed: %s", resp.text[:200])
        raise AuthenticationError(
            f"Failed to exchange code for token. Status: {resp.status_code}"
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise AuthenticationError("GitHub returned an unreadable token response.") from exc
    if not isinstance(data, dict):
        raise AuthenticationError("GitHub returned an unreadable token response.")

    if data.get("error"):
        raise AuthenticationError(data.get("error_description") or data["error"])
    if not data.get("access_token"):
        raise AuthenticationError("Access token not found in GitHub response.")
    return data["access_token"]


class TokenStore:
    """The one persisted credential: the user's GitHub access token."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        token = self.path.read_text().strip()
        return token or None

    def save(self, token: str) -> None:
        self.path.write_text(token)
        _chmod_safe(self.path, 0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
