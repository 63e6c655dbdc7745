"""Core data models shared across docagent components."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ProcessingContext:
    """Identifies one documentation run.

    ``branch`` is None when the run should target the repository default branch;
    the processor fills it in once it has an installation session.
    """

    installation_id: int
    owner: str
    repo: str
    branch: Optional[str]

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}@{self.branch or '<default>'}"


@dataclass(frozen=True)
class RepositoryFile:
    """A fetched repository file that survived filtering."""

    path: str
    content: str


@dataclass(frozen=True)
class TreeEntry:
    """Blob entry from a recursive tree listing."""

    path: str
    sha: Optional[str] = None
    size: Optional[int] = None


@dataclass
class TreeListing:
    """Result of listing a branch tree; ``truncated`` mirrors the host's flag."""

    files: List[TreeEntry] = field(default_factory=list)
    truncated: bool = False


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs for a single documentation completion request."""

    api_key: str
    model: str
    owner: str
    repo: str
    branch: str
    snapshot: str
    timeout_ms: int = 120_000
