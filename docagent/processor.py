"""Orchestration of a single documentation run for one repository branch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Sequence

from .config import Settings
from .fetcher import collect_files, fetch_all
from .filters import PathFilter, contains_secret
from .github import DocumentationPublisher, GitHubAPIError, GitHubApp, GitHubClient
from .llm import DocumentationGenerator
from .logging import get_logger
from .models import GenerationRequest, ProcessingContext, TreeListing
from .snapshot import SnapshotBuilder

README_PATH = "README.md"


class RunState(str, Enum):
    """Steps of a documentation run, in execution order."""

    AUTH_PENDING = "auth_pending"
    README_FETCH = "readme_fetch"
    TREE_LIST = "tree_list"
    FILE_FETCH = "file_fetch"
    SNAPSHOT_BUILD = "snapshot_build"
    GENERATE = "generate"
    COMMIT = "commit"
    DONE = "done"
    FAILED = "failed"


class ProcessingError(RuntimeError):
    """Raised when a run fails; ``state`` names the step that failed."""

    def __init__(self, context: ProcessingContext, state: RunState, reason: str) -> None:
        super().__init__(f"Documentation run for {context.slug} failed during {state.value}: {reason}")
        self.context = context
        self.state = state


@dataclass
class RunOutcome:
    """Summary of a completed run."""

    context: ProcessingContext
    state: RunState
    candidate_count: int
    file_count: int
    tree_truncated: bool
    created: bool


class RepositoryProcessor:
    """Sequences auth, listing, fetching, generation and commit for a run.

    Every collaborator is a constructor argument so the pipeline can be driven
    with fakes; ``from_settings`` wires the production ones.
    """

    def __init__(
        self,
        settings: Settings,
        github: GitHubApp,
        *,
        generator: DocumentationGenerator | None = None,
        publisher: DocumentationPublisher | None = None,
        snapshot_builder: SnapshotBuilder | None = None,
        path_filter: Callable[[str], bool] | None = None,
        secret_check: Callable[[str], bool] = contains_secret,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.github = github
        self.generator = generator or DocumentationGenerator(
            base_url=settings.llm_base_url, temperature=settings.llm_temperature
        )
        self.publisher = publisher or DocumentationPublisher()
        self.snapshot_builder = snapshot_builder or SnapshotBuilder(
            max_files=settings.max_files, max_file_chars=settings.max_file_chars
        )
        self.path_filter = path_filter or PathFilter(settings.exclude_paths)
        self.secret_check = secret_check
        self.logger = logger or get_logger("processor")

    @classmethod
    def from_settings(cls, settings: Settings, *, logger: logging.Logger | None = None) -> "RepositoryProcessor":
        github = GitHubApp(settings.app_id, settings.private_key, base_url=settings.github_api_url)
        return cls(settings, github, logger=logger)

    async def process(self, context: ProcessingContext) -> RunOutcome:
        """Run the full pipeline for ``context`` and commit the documentation."""
        state = RunState.AUTH_PENDING
        self.logger.info("Starting documentation run for %s", context.slug)
        try:
            client = await self.github.installation_client(context.installation_id)
            async with client:
                if not context.branch:
                    branch = await client.get_default_branch(context.owner, context.repo)
                    context = replace(context, branch=branch)
                    self.logger.debug("Resolved default branch for %s", context.slug)

                state = RunState.README_FETCH
                readme = await self._fetch_readme(client, context)

                state = RunState.TREE_LIST
                listing = await client.list_repository_files(context.owner, context.repo, context.branch)
                if listing.truncated:
                    self.logger.warning(
                        "Repository tree for %s was truncated by the GitHub API; documentation may be incomplete",
                        context.slug,
                    )

                state = RunState.FILE_FETCH
                candidates = self.select_candidates(listing)
                self.logger.debug("Fetching %d candidate files for %s", len(candidates), context.slug)

                async def fetch_one(path: str) -> str:
                    return await client.get_file_content(context.owner, context.repo, path, context.branch)

                results = await fetch_all(
                    candidates,
                    self.settings.max_concurrent_file_reads,
                    fetch_one,
                    secret_check=self.secret_check,
                    logger=self.logger,
                )
                files = collect_files(results)

                state = RunState.SNAPSHOT_BUILD
                snapshot = self.snapshot_builder.build(readme, files)

                state = RunState.GENERATE
                documentation = await self.generator.generate(
                    GenerationRequest(
                        api_key=self.settings.llm_api_key,
                        model=self.settings.llm_model,
                        owner=context.owner,
                        repo=context.repo,
                        branch=context.branch,
                        snapshot=snapshot,
                        timeout_ms=self.settings.llm_timeout_ms,
                    )
                )

                state = RunState.COMMIT
                published = await self.publisher.publish(
                    client,
                    context.owner,
                    context.repo,
                    context.branch,
                    documentation,
                    self.settings.commit_actor,
                )
        except Exception as exc:
            self.logger.debug("Documentation run for %s stopped during %s", context.slug, state.value)
            raise ProcessingError(context, state, str(exc)) from exc

        self.logger.info(
            "%s %s for %s from %d files",
            "Created" if published.created else "Updated",
            published.path,
            context.slug,
            len(files),
        )
        return RunOutcome(
            context=context,
            state=RunState.DONE,
            candidate_count=len(candidates),
            file_count=len(files),
            tree_truncated=listing.truncated,
            created=published.created,
        )

    def select_candidates(self, listing: TreeListing) -> List[str]:
        """Tree paths eligible for fetching: not the README and not filtered out."""
        return candidate_paths([entry.path for entry in listing.files], self.path_filter)

    async def _fetch_readme(self, client: GitHubClient, context: ProcessingContext) -> str:
        try:
            return await client.get_file_content(context.owner, context.repo, README_PATH, context.branch)
        except Exception as exc:
            if isinstance(exc, GitHubAPIError) and exc.status == 404:
                return ""
            self.logger.warning(
                "Unable to read %s for %s; continuing with empty README: %s", README_PATH, context.slug, exc
            )
        return ""


def candidate_paths(paths: Sequence[str], path_filter: Callable[[str], bool]) -> List[str]:
    """Drop the README (surfaced separately) and anything the path filter rejects."""
    readme_key = README_PATH.lower()
    return [path for path in paths if path and path.lower() != readme_key and path_filter(path)]
