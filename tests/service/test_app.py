"""Tests for the FastAPI webhook service."""

from __future__ import annotations

import json
import logging

import pytest
from fastapi.testclient import TestClient

from docagent.models import ProcessingContext
from docagent.security import compute_signature
from docagent.service import create_app

SECRET = "secret"
ACTOR = "doc-agent-github-app"


class _StubProcessor:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[ProcessingContext] = []
        self.error = error

    async def process(self, context: ProcessingContext) -> None:
        self.calls.append(context)
        if self.error is not None:
            raise self.error


@pytest.fixture
def processor() -> _StubProcessor:
    return _StubProcessor()


@pytest.fixture
def client(make_settings, processor: _StubProcessor) -> TestClient:
    app = create_app(
        make_settings(webhook_secret=SECRET, commit_actor=ACTOR),
        lambda: processor,
        logger=logging.getLogger("tests.service"),
    )
    return TestClient(app)


def _post(client: TestClient, event: str, payload: object, *, signature: str | None = None):
    body = json.dumps(payload).encode("utf-8")
    headers = {
        "Content-Type": "application/json",
        "X-GitHub-Event": event,
        "X-Hub-Signature-256": signature or compute_signature(body, SECRET),
    }
    return client.post("/webhook", content=body, headers=headers)


def _push(ref: str = "refs/heads/main", installation_id: int = 99, author: str = "human", committer: str = "human") -> dict:
    return {
        "ref": ref,
        "installation": {"id": installation_id},
        "repository": {"default_branch": "main", "name": "repo", "owner": {"login": "owner"}},
        "head_commit": {"author": {"name": author}, "committer": {"name": committer}},
    }


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_webhook_rejects_invalid_signature(client: TestClient, processor: _StubProcessor) -> None:
    response = _post(client, "push", _push(), signature="sha256=bad")

    assert response.status_code == 401
    assert response.text == "Invalid signature"
    assert processor.calls == []


def test_webhook_rejects_missing_signature(client: TestClient, processor: _StubProcessor) -> None:
    response = client.post("/webhook", content=b"{}", headers={"X-GitHub-Event": "push"})

    assert response.status_code == 401
    assert processor.calls == []


def test_webhook_triggers_run_for_default_branch_push(client: TestClient, processor: _StubProcessor) -> None:
    response = _post(client, "push", _push())

    assert response.status_code == 202
    assert response.text == "accepted"
    assert processor.calls == [
        ProcessingContext(installation_id=99, owner="owner", repo="repo", branch="main")
    ]


def test_webhook_ignores_push_on_non_default_branch(client: TestClient, processor: _StubProcessor) -> None:
    response = _post(client, "push", _push(ref="refs/heads/feature/my-branch", installation_id=42))

    assert response.status_code == 202
    assert processor.calls == []


def test_webhook_ignores_bot_authored_push(client: TestClient, processor: _StubProcessor) -> None:
    response = _post(client, "push", _push(installation_id=11, author=ACTOR, committer=ACTOR))

    assert response.status_code == 202
    assert response.text == "ignored bot commit"
    assert processor.calls == []


def test_webhook_runs_when_only_committer_is_the_bot(client: TestClient, processor: _StubProcessor) -> None:
    response = _post(client, "push", _push(author="human", committer=ACTOR))

    assert response.status_code == 202
    assert response.text == "accepted"
    assert len(processor.calls) == 1


def test_webhook_triggers_run_for_repository_dispatch(client: TestClient, processor: _StubProcessor) -> None:
    payload = {
        "action": "generate-documentation",
        "installation": {"id": 77},
        "repository": {"default_branch": "main", "name": "repo", "owner": {"login": "owner"}},
        "client_payload": {"branch": "release"},
    }

    response = _post(client, "repository_dispatch", payload)

    assert response.status_code == 202
    assert processor.calls == [
        ProcessingContext(installation_id=77, owner="owner", repo="repo", branch="release")
    ]


def test_webhook_ignores_unrelated_dispatch_action(client: TestClient, processor: _StubProcessor) -> None:
    payload = {
        "action": "deploy",
        "installation": {"id": 77},
        "repository": {"default_branch": "main", "name": "repo", "owner": {"login": "owner"}},
    }

    response = _post(client, "repository_dispatch", payload)

    assert response.status_code == 202
    assert processor.calls == []


def test_webhook_rejects_malformed_payloads(client: TestClient, processor: _StubProcessor) -> None:
    body = b"not json"
    response = client.post(
        "/webhook",
        content=body,
        headers={"X-GitHub-Event": "push", "X-Hub-Signature-256": compute_signature(body, SECRET)},
    )
    assert response.status_code == 400

    response = _post(client, "push", {"ref": "refs/heads/main"})
    assert response.status_code == 400
    assert processor.calls == []


def test_background_failure_is_logged_not_raised(make_settings, caplog) -> None:
    processor = _StubProcessor(error=RuntimeError("generation exploded"))
    app = create_app(
        make_settings(webhook_secret=SECRET, commit_actor=ACTOR),
        lambda: processor,
        logger=logging.getLogger("tests.service"),
    )

    with caplog.at_level(logging.ERROR, logger="tests.service"):
        response = _post(TestClient(app), "push", _push())

    assert response.status_code == 202
    assert len(processor.calls) == 1
    errors = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert errors and "owner/repo@main" in errors[0].getMessage()
    assert errors[0].exc_info is not None
