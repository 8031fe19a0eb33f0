# Shared fixtures: settings, token store and an in-memory GitHub.
# Created: 2026-10-19

import base64
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from aurorasubmit.config import Settings
from aurorasubmit.github.client import GitHubClient
from aurorasubmit.github.oauth import TokenStore
from aurorasubmit.session import SubmissionSession

UPSTREAM = "/repos/DanielmGM/AuroraSkins"
FORK = "/repos/contributor/AuroraSkins"

SKIN_METADATA = {
    "metaver": 1,
    "skinname": "Neon Blue",
    "author": "Jane Doe",
    "revision": "2",
    "auroraver": "0.7b",
    "description": "Glow {and} shine",
}


def make_xzp(metadata: dict[str, Any] | None = None) -> bytes:
    """A fake skin package: binary noise around the metadata block."""
    block = json.dumps(metadata or SKIN_METADATA, separators=(",", ":")).encode("latin-1")
    return b"XUIZ\x00\x01\x02\xff\xfe" + block + b"\x00\x9c}}\x00trailer"


def make_cfljson(info: dict[str, Any] | None = None) -> bytes:
    info = info or {"name": "Shelf Wall", "author": "Sam Roe", "version": "1.0"}
    return json.dumps({"info": info, "settings": {"angle": 45}}).encode("utf-8")


class FakeGitHub:
    """Routes requests the way api.github.com would for the happy path."""

    def __init__(self, manifest: Any = None, valid_tokens: tuple[str, ...] = ("gho_valid",)):
        self.manifest = manifest
        self.valid_tokens = valid_tokens
        self.requests: list[httpx.Request] = []
        self.fail_on: tuple[str, str] | None = None
        self.on_commit: Callable[[httpx.Request], None] | None = None

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client_factory(self, token: str, settings: Settings) -> GitHubClient:
        return GitHubClient(token, settings, transport=self.transport())

    def calls(self, method: str | None = None) -> list[tuple[str, str]]:
        return [
            (r.method, r.url.path) for r in self.requests if method is None or r.method == method
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path

        if self.fail_on and (method, path) == self.fail_on:
            return httpx.Response(422, json={"message": "Reference already exists"})

        if path == "/login/oauth/access_token":
            payload = json.loads(request.content)
            if payload["code"] == "good-code":
                return httpx.Response(200, json={"access_token": "gho_valid"})
            if payload["code"] == "revoked-code":
                return httpx.Response(200, json={"access_token": "gho_revoked"})
            return httpx.Response(
                200,
                json={
                    "error": "bad_verification_code",
                    "error_description": "The code passed is incorrect or expired.",
                },
            )

        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        if token not in self.valid_tokens:
            return httpx.Response(401, json={"message": "Bad credentials"})

        if method == "GET" and path == "/user":
            return httpx.Response(200, json={"login": "contributor"})
        if method == "GET" and path == f"{UPSTREAM}/contents/repo/list.json":
            if self.manifest is None:
                return httpx.Response(404, json={"message": "Not Found"})
            encoded = base64.encodebytes(json.dumps(self.manifest).encode()).decode()
            return httpx.Response(200, json={"content": encoded, "encoding": "base64"})
        if method == "POST" and path == f"{UPSTREAM}/forks":
            return httpx.Response(202, json={"owner": {"login": "contributor"}})
        if method == "GET" and path == UPSTREAM:
            return httpx.Response(200, json={"default_branch": "master"})
        if method == "GET" and path == f"{FORK}/git/ref/heads/master":
            return httpx.Response(200, json={"object": {"sha": "0123456789abcdef"}})
        if method == "POST" and path == f"{FORK}/git/refs":
            return httpx.Response(201, json=json.loads(request.content))
        if method == "PUT" and path.startswith(f"{FORK}/contents/"):
            if self.on_commit:
                self.on_commit(request)
            return httpx.Response(201, json={"content": {"path": path}})
        if method == "POST" and path == f"{UPSTREAM}/pulls":
            return httpx.Response(
                201,
                json={"number": 42, "html_url": "https://github.com/DanielmGM/AuroraSkins/pull/42"},
            )
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        github_client_id="client-123",
        github_client_secret="secret-456",
    )


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "github_token")


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub(
        manifest={
            "backgrounds": [{"id": "bg.janedoe.sunset"}],
            "coverflows": [],
            "skins": [{"id": "skin.someone.classic"}],
        }
    )


@pytest.fixture
def session(settings, token_store, fake_github) -> SubmissionSession:
    return SubmissionSession(
        settings,
        token_store,
        client_factory=fake_github.client_factory,
        oauth_transport=fake_github.transport(),
    )


def unreachable_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("github unreachable", request=request)

    return httpx.MockTransport(handler)
