"""Assembly of the bounded repository snapshot embedded in the LLM prompt."""

from __future__ import annotations

from typing import List, Sequence

from .models import RepositoryFile

DEFAULT_MAX_FILES = 80
DEFAULT_MAX_FILE_CHARS = 9000
TRUNCATION_MARKER = "\n...<truncated>"
MISSING_README = "(README missing or empty)"


class SnapshotBuilder:
    """Renders README text and file bodies into one Markdown document."""

    def __init__(
        self,
        *,
        max_files: int = DEFAULT_MAX_FILES,
        max_file_chars: int = DEFAULT_MAX_FILE_CHARS,
    ) -> None:
        self.max_files = max(0, max_files)
        self.max_file_chars = max(0, max_file_chars)

    def build(self, readme: str | None, files: Sequence[RepositoryFile]) -> str:
        """Return the snapshot text; input order is preserved."""
        sections = [self._render_file(file) for file in list(files)[: self.max_files]]
        lines: List[str] = [
            "## Existing README",
            readme if readme and readme.strip() else MISSING_README,
            "",
            "## Repository Source Snapshot",
            *sections,
        ]
        return "\n".join(lines)

    def truncate(self, content: str) -> str:
        if len(content) <= self.max_file_chars:
            return content
        return f"{content[: self.max_file_chars]}{TRUNCATION_MARKER}"

    def _render_file(self, file: RepositoryFile) -> str:
        return f"### File: {file.path}\n\n```\n{self.truncate(file.content)}\n```\n"


def build_snapshot(readme: str | None, files: Sequence[RepositoryFile]) -> str:
    """Build a snapshot with the default limits."""
    return SnapshotBuilder().build(readme, files)


__all__ = [
    "DEFAULT_MAX_FILES",
    "DEFAULT_MAX_FILE_CHARS",
    "MISSING_README",
    "SnapshotBuilder",
    "TRUNCATION_MARKER",
    "build_snapshot",
]
