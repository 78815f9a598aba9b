import hashlib
import hmac
import json
from unittest import mock

import pytest
from fastapi.testclient import TestClient

from hunkview.api.dependencies import get_settings
from hunkview.api.routes import github as github_routes
from hunkview.common.webhook_utils import extract_review_comment_event, verify_signature
from hunkview.core.config import Settings
from hunkview.core.exceptions import InvalidWebhookPayloadError, WebhookSignatureError
from hunkview.main import app

SECRET = "s3cret"


def _payload(body="!ai what does this do?", action="created"):
    return {
        "action": action,
        "comment": {
            "id": 303,
            "commit_id": "abc123",
            "path": "src/app.py",
            "diff_hunk": "@@ -1 +1 @@\n-a\n+b",
            "body": body,
            "user": {"login": "alice"},
            "author_association": "OWNER",
            "created_at": "2024-05-01T10:05:00Z",
            "in_reply_to_id": 300,
        },
        "pull_request": {"number": 7},
        "repository": {"name": "widgets", "owner": {"login": "octo"}},
    }


def _sign(body: bytes, secret: str = SECRET) -> str:
    return "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


@pytest.fixture
def client():
    app.dependency_overrides[get_settings] = lambda: Settings(GITHUB_WEBHOOK_SECRET=SECRET)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _post(client, payload, event="pull_request_review_comment", signature=None):
    body = json.dumps(payload).encode("utf-8")
    headers = {
        "X-GitHub-Event": event,
        "X-Hub-Signature-256": signature if signature is not None else _sign(body),
        "Content-Type": "application/json",
    }
    return client.post("/api/github/webhook", content=body, headers=headers)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ping(client):
    response = _post(client, {"zen": "Keep it logically awesome."}, event="ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "pong"}


def test_review_comment_is_scheduled(client):
    with mock.patch.object(github_routes, "handle_review_comment_event") as mock_handle:
        response = _post(client, _payload())

    assert response.status_code == 200
    assert response.json()["status"] == "accepted"
    mock_handle.assert_called_once()
    event = mock_handle.call_args.args[0]
    assert event.comment_id == 303
    assert event.owner == "octo"
    assert event.in_reply_to_id == 300


def test_review_comment_without_prefix_is_ignored(client):
    with mock.patch.object(github_routes, "handle_review_comment_event") as mock_handle:
        response = _post(client, _payload(body="nice change"))

    assert response.json()["status"] == "ignored"
    mock_handle.assert_not_called()


def test_unhandled_event_is_ignored(client):
    response = _post(client, {"action": "opened"}, event="pull_request")

    assert response.status_code == 200
    assert response.json()["status"] == "ignored"


def test_bad_signature_is_rejected(client):
    response = _post(client, _payload(), signature="sha256=deadbeef")

    assert response.status_code == 401


def test_missing_signature_is_rejected(client):
    response = _post(client, _payload(), signature="")

    assert response.status_code == 401


def test_invalid_json_is_rejected(client):
    body = b"{not json"
    response = client.post(
        "/api/github/webhook",
        content=body,
        headers={"X-GitHub-Event": "ping", "X-Hub-Signature-256": _sign(body)},
    )

    assert response.status_code == 400


def test_incomplete_payload_is_rejected(client):
    response = _post(client, {"action": "created", "comment": {"body": "!ai hi"}})

    assert response.status_code == 400


def test_verify_signature():
    body = b'{"a": 1}'
    verify_signature(SECRET, body, _sign(body))
    verify_signature("", body, None)

    with pytest.raises(WebhookSignatureError):
        verify_signature(SECRET, body, None)
    with pytest.raises(WebhookSignatureError):
        verify_signature(SECRET, body, "sha1=abc")
    with pytest.raises(WebhookSignatureError):
        verify_signature(SECRET, body, _sign(body, "other"))


def test_extract_review_comment_event():
    event = extract_review_comment_event(_payload())

    assert event.pull_number == 7
    assert event.path == "src/app.py"
    assert event.login == "alice"
    assert event.author_association == "OWNER"

    assert extract_review_comment_event(_payload(action="edited")) is None

    payload = _payload()
    payload["comment"]["user"] = None
    assert extract_review_comment_event(payload) is None

    payload = _payload()
    del payload["comment"]["commit_id"]
    with pytest.raises(InvalidWebhookPayloadError):
        extract_review_comment_event(payload)
