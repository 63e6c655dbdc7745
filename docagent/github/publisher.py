"""Commits generated documentation back to the repository."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from ..filters import DOCUMENTATION_PATH
from .client import GitHubClient

COMMIT_MESSAGE = "docs: generate comprehensive repository documentation"


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a documentation upsert."""

    path: str
    created: bool


def commit_identity(actor: str) -> Dict[str, str]:
    """Author/committer identity with a noreply email derived from the actor name."""
    return {"name": actor, "email": f"{actor}@users.noreply.github.com"}


class DocumentationPublisher:
    """Creates or updates the documentation file on a branch."""

    def __init__(self, *, path: str = DOCUMENTATION_PATH, message: str = COMMIT_MESSAGE) -> None:
        self.path = path
        self.message = message

    async def publish(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        branch: str,
        content: str,
        actor: str,
    ) -> PublishResult:
        existing_sha = await client.get_file_sha(owner, repo, self.path, branch)
        identity = commit_identity(actor)
        await client.put_file(
            owner,
            repo,
            self.path,
            message=self.message,
            content=content,
            branch=branch,
            sha=existing_sha,
            author=identity,
            committer=identity,
        )
        return PublishResult(path=self.path, created=existing_sha is None)
