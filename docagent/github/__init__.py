"""GitHub App authentication, REST access and publishing."""

from .auth import GitHubApp
from .client import GitHubAPIError, GitHubClient
from .publisher import COMMIT_MESSAGE, DocumentationPublisher, PublishResult, commit_identity

__all__ = [
    "COMMIT_MESSAGE",
    "DocumentationPublisher",
    "GitHubAPIError",
    "GitHubApp",
    "GitHubClient",
    "PublishResult",
    "commit_identity",
]
