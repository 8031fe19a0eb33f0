# Tests for the FastAPI surface.
# Created: 2026-10-19

from urllib.parse import parse_qs, urlparse

import pytest
from conftest import make_cfljson, make_xzp, unreachable_transport
from fastapi.testclient import TestClient

from aurorasubmit.api.app import create_app

JPEG = ("shot.jpg", b"\xff\xd8jpeg", "image/jpeg")


@pytest.fixture
def anonymous_client(session):
    with TestClient(create_app(session=session)) as client:
        yield client


@pytest.fixture
def client(session, token_store):
    token_store.save("gho_valid")
    with TestClient(create_app(session=session)) as client:
        yield client


def test_health(anonymous_client):
    resp = anonymous_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_session_state_when_logged_out(anonymous_client):
    resp = anonymous_client.get("/api/session")
    assert resp.json() == {
        "authenticated": False,
        "login": None,
        "manifest_entries": 0,
        "queue": [],
    }


def test_lifespan_resumes_stored_token(client):
    data = client.get("/").json()
    assert data["authenticated"] is True
    assert data["login"] == "contributor"
    assert data["manifest_entries"] == 2


def test_login_redirects_to_github(anonymous_client):
    resp = anonymous_client.get("/auth/login", follow_redirects=False)
    assert resp.status_code == 307
    location = urlparse(resp.headers["location"])
    assert location.netloc == "github.com"
    assert parse_qs(location.query)["client_id"] == ["client-123"]


def test_callback_logs_in_and_redirects(anonymous_client, token_store):
    resp = anonymous_client.get("/auth/callback?code=good-code", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    assert token_store.load() == "gho_valid"
    assert anonymous_client.get("/api/session").json()["authenticated"] is True


def test_callback_reports_exchange_error(anonymous_client):
    resp = anonymous_client.get("/auth/callback?code=stale-code", follow_redirects=False)
    assert resp.status_code == 401
    assert resp.json() == {
        "status": "error",
        "message": "Error during authentication: The code passed is incorrect or expired.",
    }


def test_callback_reports_denied_access(anonymous_client):
    resp = anonymous_client.get(
        "/auth/callback?error=access_denied&error_description=User+denied", follow_redirects=False
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Error during authentication: User denied"


def test_callback_reports_unreachable_github(anonymous_client, session):
    session.oauth_transport = unreachable_transport()
    resp = anonymous_client.get("/auth/callback?code=x", follow_redirects=False)
    assert resp.status_code == 401
    assert resp.json() == {
        "status": "error",
        "message": "Error during authentication: github unreachable",
    }


def test_callback_keeps_rejected_token_off_disk(anonymous_client, token_store):
    resp = anonymous_client.get("/auth/callback?code=revoked-code", follow_redirects=False)
    assert resp.status_code == 401
    assert token_store.load() is None
    assert anonymous_client.get("/api/session").json()["authenticated"] is False


class TestTokenExchangeEndpoint:
    def test_returns_token(self, anonymous_client):
        resp = anonymous_client.post("/api/github-callback", json={"code": "good-code"})
        assert resp.status_code == 200
        assert resp.json() == {"access_token": "gho_valid"}

    def test_missing_code(self, anonymous_client):
        resp = anonymous_client.post("/api/github-callback", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Authorization code is missing"}

    def test_exchange_failure(self, anonymous_client):
        resp = anonymous_client.post("/api/github-callback", json={"code": "stale-code"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "The code passed is incorrect or expired."}

    def test_unreachable_github(self, anonymous_client, session):
        session.oauth_transport = unreachable_transport()
        resp = anonymous_client.post("/api/github-callback", json={"code": "x"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "github unreachable"}

    def test_body_that_is_not_json(self, anonymous_client):
        resp = anonymous_client.post(
            "/api/github-callback",
            content=b"code=good-code",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Authorization code is missing"}

    def test_body_that_is_not_an_object(self, anonymous_client):
        resp = anonymous_client.post("/api/github-callback", json=["good-code"])
        assert resp.status_code == 400
        assert resp.json() == {"error": "Authorization code is missing"}

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_other_methods_not_allowed(self, anonymous_client, method):
        resp = anonymous_client.request(method, "/api/github-callback")
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method Not Allowed"}
        assert resp.headers["allow"] == "POST"


def test_analyze_skin(anonymous_client):
    resp = anonymous_client.post(
        "/api/metadata/skin", files={"file": ("neon.xzp", make_xzp(), "application/octet-stream")}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "success"
    assert data["metadata"]["skinname"] == "Neon Blue"
    assert data["display"][0] == {"label": "Skin Name", "value": "Neon Blue"}


def test_analyze_skin_without_metadata(anonymous_client):
    resp = anonymous_client.post(
        "/api/metadata/skin", files={"file": ("x.xzp", b"\x00\x01", "application/octet-stream")}
    )
    assert resp.status_code == 400
    assert resp.json() == {
        "status": "error",
        "message": "Could not find metadata block in skin file.",
    }


def test_analyze_coverflow(anonymous_client):
    resp = anonymous_client.post(
        "/api/metadata/coverflow",
        files={"file": ("shelf.cfljson", make_cfljson(), "application/json")},
    )
    assert resp.status_code == 200
    assert [f["label"] for f in resp.json()["display"]] == ["Name", "Author", "Version"]


def test_queue_requires_login(anonymous_client):
    resp = anonymous_client.get("/api/queue")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Not authenticated with GitHub."


def test_queue_add_remove_and_submit(client):
    resp = client.post(
        "/api/queue",
        data={"type": "background", "name": "Night Sky", "author": "Jane Doe"},
        files={"image": JPEG},
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == 'Added "Night Sky" to the queue.'

    resp = client.post(
        "/api/queue",
        data={"type": "coverflow"},
        files={"package": ("shelf.cfljson", make_cfljson(), "application/json"), "screenshot": JPEG},
    )
    items = resp.json()["items"]
    assert [i["item_id"] for i in items] == ["bg.janedoe.nightsky", "cf.samroe.shelfwall"]
    assert [i["id"] for i in items] == [0, 1]

    resp = client.delete("/api/queue/0")
    assert resp.json()["status"] == "success"
    assert [i["id"] for i in resp.json()["items"]] == [1]

    resp = client.delete("/api/queue/0")
    assert resp.json()["status"] == "info"

    resp = client.post("/api/pull-request")
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Pull Request created successfully!"
    assert data["url"] == "https://github.com/DanielmGM/AuroraSkins/pull/42"
    assert data["branch"].startswith("add/submission-batch-")
    assert data["submitted"] == [1]

    assert client.get("/api/queue").json()["items"] == []


def test_queue_rejects_duplicate(client):
    resp = client.post(
        "/api/queue",
        data={"type": "background", "name": "Sunset", "author": "Jane Doe"},
        files={"image": JPEG},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "An item with ID 'bg.janedoe.sunset' already exists."


def test_queue_rejects_incomplete_form(client):
    resp = client.post("/api/queue", data={"type": "background", "name": "Sky"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Please fill all fields for the background."


def test_pull_request_with_empty_queue(client):
    resp = client.post("/api/pull-request")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Submission queue is empty. Please add files first."


def test_pull_request_failure_is_bad_gateway(client, fake_github):
    client.post(
        "/api/queue",
        data={"type": "background", "name": "Night Sky", "author": "Jane Doe"},
        files={"image": JPEG},
    )
    fake_github.fail_on = ("POST", "/repos/DanielmGM/AuroraSkins/forks")

    resp = client.post("/api/pull-request")

    assert resp.status_code == 502
    assert resp.json()["message"].startswith("Error creating Pull Request:")
    assert len(client.get("/api/queue").json()["items"]) == 1


def test_manifest_refresh(client, fake_github):
    fake_github.manifest = {"backgrounds": [], "coverflows": [], "skins": []}
    resp = client.post("/api/manifest/refresh")
    assert resp.json()["entries"] == 0


def test_logout(client, token_store):
    assert client.post("/auth/logout").json()["status"] == "success"
    assert token_store.load() is None
    assert client.get("/api/session").json()["authenticated"] is False
