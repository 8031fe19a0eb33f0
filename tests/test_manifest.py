import httpx
import pytest
from conftest import FakeGitHub

from aurorasubmit.errors import DuplicateItemError
from aurorasubmit.github.client import GitHubClient
from aurorasubmit.manifest import ContentManifest, ensure_unique, fetch_manifest


def test_from_document_flattens_sections():
    manifest = ContentManifest.from_document(
        {
            "backgrounds": [{"id": "bg.a.b"}],
            "coverflows": [{"id": "cf.a.b"}],
            "skins": [{"id": "skin.a.b"}, {"id": "skin.c.d"}],
        }
    )
    assert len(manifest) == 4
    assert manifest.contains("skin.c.d")
    assert not manifest.contains("skin.x.y")


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"backgrounds": [], "skins": []},
        {"backgrounds": [], "coverflows": {}, "skins": []},
        "list",
    ],
)
def test_unexpected_shape_yields_empty(document):
    assert len(ContentManifest.from_document(document)) == 0


def test_contains_ignores_non_object_entries():
    manifest = ContentManifest(["bg.a.b", None, {"name": "no id"}])
    assert not manifest.contains("bg.a.b")


def test_ensure_unique():
    manifest = ContentManifest([{"id": "bg.a.b"}])
    ensure_unique(manifest, "bg.a.c")
    with pytest.raises(DuplicateItemError, match="An item with ID 'bg.a.b' already exists."):
        ensure_unique(manifest, "bg.a.b")


@pytest.mark.asyncio
async def test_fetch_manifest(settings, fake_github):
    async with fake_github.client_factory("gho_valid", settings) as client:
        manifest = await fetch_manifest(client, settings)
    assert manifest.contains("bg.janedoe.sunset")
    assert manifest.contains("skin.someone.classic")


@pytest.mark.asyncio
async def test_missing_manifest_is_empty(settings):
    fake = FakeGitHub(manifest=None)
    async with fake.client_factory("gho_valid", settings) as client:
        manifest = await fetch_manifest(client, settings)
    assert len(manifest) == 0


@pytest.mark.asyncio
async def test_malformed_manifest_content_is_empty(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content": "bm90IGpzb24="})  # "not json"

    async with GitHubClient("t", settings, transport=httpx.MockTransport(handler)) as client:
        manifest = await fetch_manifest(client, settings)
    assert len(manifest) == 0


@pytest.mark.asyncio
async def test_network_failure_is_empty(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    async with GitHubClient("t", settings, transport=httpx.MockTransport(handler)) as client:
        manifest = await fetch_manifest(client, settings)
    assert len(manifest) == 0
