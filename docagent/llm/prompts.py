"""Prompt text for documentation generation."""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a principal technical writer and software architect. Produce exhaustive, "
    "accurate, implementation-grounded repository documentation in Markdown. Always include "
    "at least two Mermaid diagrams: one architecture/component diagram and one "
    "workflow/sequence diagram."
)

DOCUMENTATION_RULES: tuple[str, ...] = (
    "Merge and preserve useful README content.",
    "Cover setup, architecture, modules, API/CLI interfaces, configuration, workflows, "
    "extension points, and troubleshooting.",
    "Add a table of contents and section anchors.",
    "Include explicit assumptions and unknowns if any code is ambiguous.",
    "Output only Markdown content suitable for documentation.md.",
)


def build_user_prompt(owner: str, repo: str, branch: str, snapshot: str) -> str:
    """Return the user message embedding repository identity and snapshot."""
    rules = "\n".join(f"{number}) {rule}" for number, rule in enumerate(DOCUMENTATION_RULES, start=1))
    return (
        f"Generate a complete documentation.md for {owner}/{repo} on branch {branch}.\n\n"
        f"Rules:\n{rules}\n\n"
        f"Repository material:\n\n{snapshot}"
    )


__all__ = ["DOCUMENTATION_RULES", "SYSTEM_PROMPT", "build_user_prompt"]
