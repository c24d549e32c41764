"""Tests for webhook handler."""

import hashlib
import hmac
import json
import logging

import pytest
from fastapi.testclient import TestClient

from build_hook.config import Settings
from build_hook.main import create_app
from build_hook.webhook.models import PushEvent, ReleaseEvent

SECRET = "s3cr3t"
URL = "/webhook/github"


class Recorder:
    """Collects payloads handed to callbacks."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[object] = []
        self.fail = fail

    async def __call__(self, payload: object) -> None:
        self.calls.append(payload)
        if self.fail:
            raise RuntimeError("disk full on /var/lib/builder")


@pytest.fixture
def push_recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def release_recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def client(push_recorder: Recorder, release_recorder: Recorder) -> TestClient:
    """Create test client with callbacks that record their payloads."""
    app = create_app(
        Settings(webhook=SECRET),
        push_callback=push_recorder,
        release_callback=release_recorder,
    )
    return TestClient(app)


def _sign_payload(payload: bytes, secret: str = SECRET) -> str:
    """Generate GitHub webhook signature."""
    return (
        "sha1="
        + hmac.new(
            secret.encode("utf-8"),
            payload,
            hashlib.sha1,
        ).hexdigest()
    )


def _post(client: TestClient, payload: bytes, event: str, signature: str | None = None):
    headers = {"X-GitHub-Event": event, "Content-Type": "application/json"}
    headers["X-Hub-Signature"] = _sign_payload(payload) if signature is None else signature
    return client.post(URL, content=payload, headers=headers)


def test_health_endpoint(client: TestClient):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_push_invokes_callback(client: TestClient, push_recorder: Recorder):
    """Test a signed push event reaches the push callback."""
    payload = b'{"ref":"refs/heads/main"}'

    response = _post(client, payload, "push")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "event": "push"}
    assert push_recorder.calls == [PushEvent(ref="refs/heads/main")]


def test_release_invokes_callback(
    client: TestClient, push_recorder: Recorder, release_recorder: Recorder
):
    """Test a signed release event reaches only the release callback."""
    payload = json.dumps(
        {
            "action": "published",
            "release": {"tag_name": "v1.4.0", "name": "v1.4.0"},
            "repository": {"full_name": "owner/repo"},
        }
    ).encode()

    response = _post(client, payload, "release")

    assert response.status_code == 200
    assert push_recorder.calls == []
    assert len(release_recorder.calls) == 1
    release = release_recorder.calls[0]
    assert isinstance(release, ReleaseEvent)
    assert release.release.tag_name == "v1.4.0"


def test_ping_returns_pong(client: TestClient, push_recorder: Recorder):
    """Test that ping succeeds without decoding or callbacks."""
    payload = b"zen: not even json"

    response = _post(client, payload, "ping")

    assert response.status_code == 200
    assert response.json()["status"] == "pong"
    assert push_recorder.calls == []


def test_webhook_rejects_missing_signature(client: TestClient, push_recorder: Recorder):
    """Test that a request without a signature header is rejected."""
    response = client.post(
        URL,
        content=b'{"ref":"refs/heads/main"}',
        headers={"X-GitHub-Event": "push"},
    )

    assert response.status_code == 400
    assert push_recorder.calls == []


def test_webhook_rejects_empty_signature(client: TestClient):
    """Test that an empty signature header is treated as missing."""
    response = _post(client, b"{}", "ping", signature="")
    assert response.status_code == 400


def test_webhook_rejects_invalid_signature(
    client: TestClient, push_recorder: Recorder, caplog: pytest.LogCaptureFixture
):
    """Test that webhook rejects invalid signatures."""
    with caplog.at_level(logging.WARNING):
        response = _post(client, b'{"ref":"refs/heads/main"}', "push", signature="sha1=invalid")

    assert response.status_code == 400
    assert push_recorder.calls == []
    assert "sha1=invalid" in caplog.text


def test_webhook_rejects_short_signature(client: TestClient):
    """Test that a signature shorter than its prefix is a client error."""
    response = _post(client, b'{"ref":"refs/heads/main"}', "push", signature="sh")
    assert response.status_code == 400


def test_webhook_rejects_signature_for_other_secret(client: TestClient):
    """Test that a signature computed with a different secret is rejected."""
    payload = b'{"ref":"refs/heads/main"}'
    response = _post(client, payload, "push", signature=_sign_payload(payload, "other"))
    assert response.status_code == 400


def test_webhook_rejects_unknown_event(client: TestClient):
    """Test that unsupported events are surfaced as client errors."""
    response = _post(client, b'{"deployment": {}}', "deployment")
    assert response.status_code == 400


def test_webhook_rejects_missing_event(client: TestClient):
    """Test that a request without an event header is rejected."""
    payload = b"{}"
    response = client.post(URL, content=payload, headers={"X-Hub-Signature": _sign_payload(payload)})
    assert response.status_code == 400


def test_webhook_rejects_malformed_json(client: TestClient, push_recorder: Recorder):
    """Test that malformed JSON is rejected before the callback runs."""
    response = _post(client, b'{"ref": "refs/heads/main"', "push")

    assert response.status_code == 400
    assert push_recorder.calls == []


def test_webhook_callback_failure(caplog: pytest.LogCaptureFixture):
    """Test that callback failures are logged and hidden from the sender."""
    app = create_app(Settings(webhook=SECRET), push_callback=Recorder(fail=True))
    client = TestClient(app)

    with caplog.at_level(logging.ERROR):
        response = _post(client, b'{"ref":"refs/heads/main"}', "push")

    assert response.status_code == 500
    assert "/var/lib/builder" not in response.text
    assert "disk full on /var/lib/builder" in caplog.text


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
def test_webhook_rejects_other_methods(client: TestClient, method: str):
    """Test that only POST is accepted."""
    response = client.request(method, URL)
    assert response.status_code == 405
