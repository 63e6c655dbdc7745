"""Path and content filters deciding what may enter a repository snapshot."""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterable, List, Pattern, Sequence

DOCUMENTATION_PATH = "documentation.md"

_EXCLUDED_PATH_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"^node_modules/"),
    re.compile(r"^\.git/"),
    re.compile(r"^dist/"),
    re.compile(r"^build/"),
    re.compile(r"^coverage/"),
    re.compile(r"^vendor/"),
    re.compile(r"^\.next/"),
    re.compile(r"^documentation\.md$", re.IGNORECASE),
    re.compile(r"^\.env(\..*)?$", re.IGNORECASE),
    re.compile(r"/\.env(\..*)?$", re.IGNORECASE),
    re.compile(r"^config/secrets\.ya?ml$", re.IGNORECASE),
    re.compile(r"/secrets\.ya?ml$", re.IGNORECASE),
    re.compile(r"package-lock\.json$"),
    re.compile(r"pnpm-lock\.yaml$"),
    re.compile(r"yarn\.lock$"),
    re.compile(r"\.min\.(js|css)$"),
    re.compile(r"\.(png|jpg|jpeg|gif|webp|svg|ico|pdf|zip|gz|tar)$", re.IGNORECASE),
    re.compile(r"id_rsa$", re.IGNORECASE),
    re.compile(r"\.pem$", re.IGNORECASE),
    re.compile(r"\.key$", re.IGNORECASE),
)

_SECRET_CONTENT_PATTERNS: tuple[Pattern[str], ...] = (
    # AWS access key id
    re.compile(r"AKIA[0-9A-Z]{16}"),
    re.compile(r"-----BEGIN (RSA |EC |OPENSSH )?PRIVATE KEY-----"),
    re.compile(
        r"(?:api[_-]?key|secret|token|password)\s*[:=]\s*[\"']?[A-Za-z0-9_\-]{8,}[\"']?",
        re.IGNORECASE,
    ),
    # GitHub personal access token
    re.compile(r"ghp_[A-Za-z0-9]{36}"),
    # Slack tokens
    re.compile(r"xox[baprs]-[A-Za-z0-9-]{10,}"),
)


def is_path_included(path: str) -> bool:
    """Return False when the path matches a structural exclusion rule."""
    return not any(pattern.search(path) for pattern in _EXCLUDED_PATH_PATTERNS)


def contains_secret(content: str) -> bool:
    """Return True when the content matches any secret signature."""
    return any(pattern.search(content) for pattern in _SECRET_CONTENT_PATTERNS)


@dataclass
class IgnoreRule:
    """Gitignore-style exclusion glob supplied through configuration."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str) -> bool:
        if not self.pattern:
            return False

        # Tree listings only carry blobs, so a rule naming a directory has to
        # match the parent prefixes of each file below it.
        parts = rel_path.split("/")
        parents = parts[:-1]
        if self.anchored or self.has_slash:
            prefixes = ["/".join(parents[: i + 1]) for i in range(len(parents))]
            if not self.directory_only:
                prefixes.append(rel_path)
            return any(fnmatchcase(prefix, self.pattern) for prefix in prefixes)

        names = parents if self.directory_only else parts
        return any(fnmatchcase(name, self.pattern) for name in names)


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern or pattern.startswith("#"):
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


class PathFilter:
    """Fixed exclusion rules plus optional configured globs."""

    def __init__(self, extra_excludes: Iterable[str] | None = None) -> None:
        rules: List[IgnoreRule] = []
        for pattern in extra_excludes or ():
            rule = build_ignore_rule(pattern)
            if rule is not None:
                rules.append(rule)
        self.rules: Sequence[IgnoreRule] = tuple(rules)

    def __call__(self, path: str) -> bool:
        return self.is_included(path)

    def is_included(self, path: str) -> bool:
        if not is_path_included(path):
            return False
        return not any(rule.matches(path) for rule in self.rules)


__all__ = [
    "DOCUMENTATION_PATH",
    "IgnoreRule",
    "PathFilter",
    "build_ignore_rule",
    "contains_secret",
    "is_path_included",
]
