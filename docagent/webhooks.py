"""Interpretation of GitHub webhook payloads."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .models import ProcessingContext

PUSH_EVENT = "push"
DISPATCH_EVENT = "repository_dispatch"
DISPATCH_ACTION = "generate-documentation"


class InvalidPayloadError(ValueError):
    """Raised when a webhook payload lacks the fields a run needs."""


def is_bot_commit(payload: Mapping[str, Any], actor: str) -> bool:
    """True when the push head commit was authored and committed by ``actor``."""
    head_commit = payload.get("head_commit")
    if not isinstance(head_commit, dict):
        return False
    author_name = (head_commit.get("author") or {}).get("name")
    committer_name = (head_commit.get("committer") or {}).get("name")
    return author_name == actor and committer_name == actor


def resolve_context(event: str, payload: Mapping[str, Any]) -> Optional[ProcessingContext]:
    """Return the run context for events that should trigger a run, else None.

    Pushes only count when they target the default branch. Dispatch events
    need the ``generate-documentation`` action and may override the branch via
    ``client_payload.branch``.
    """
    if event == PUSH_EVENT:
        default_branch = _default_branch(payload)
        if payload.get("ref") != f"refs/heads/{default_branch}":
            return None
        return _context(payload, default_branch)

    if event == DISPATCH_EVENT and payload.get("action") == DISPATCH_ACTION:
        client_payload = payload.get("client_payload")
        branch = client_payload.get("branch") if isinstance(client_payload, dict) else None
        return _context(payload, branch or _default_branch(payload))

    return None


def _default_branch(payload: Mapping[str, Any]) -> str:
    repository = payload.get("repository")
    if not isinstance(repository, dict) or not repository.get("default_branch"):
        raise InvalidPayloadError("payload.repository.default_branch is required")
    return str(repository["default_branch"])


def _context(payload: Mapping[str, Any], branch: str) -> ProcessingContext:
    try:
        installation_id = payload["installation"]["id"]
        repository = payload["repository"]
        owner = repository["owner"]["login"]
        repo = repository["name"]
    except (KeyError, TypeError) as exc:
        raise InvalidPayloadError(f"payload is missing {exc}") from exc
    return ProcessingContext(installation_id=installation_id, owner=owner, repo=repo, branch=str(branch))


__all__ = [
    "DISPATCH_ACTION",
    "DISPATCH_EVENT",
    "InvalidPayloadError",
    "PUSH_EVENT",
    "is_bot_commit",
    "resolve_context",
]
