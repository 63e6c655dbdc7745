"""CLI entrypoints for docagent commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

from .config import ConfigError, Settings, load_settings
from .github import GitHubAPIError
from .logging import configure_logging
from .models import ProcessingContext
from .processor import ProcessingError, RepositoryProcessor, RunOutcome


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    verbose_kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
        "default": argparse.SUPPRESS if suppress_default else False,
    }
    parser.add_argument("-v", "--verbose", **verbose_kwargs)
    parser.add_argument(
        "--config",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Optional YAML file with non-secret settings.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write timestamped logs to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docagent",
        description="Keep a generated documentation.md in sync with repository sources.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the webhook service.",
    )
    _add_common_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (defaults to the PORT setting).",
    )

    run_parser = subparsers.add_parser(
        "run",
        help="Generate and commit documentation for one repository now.",
    )
    _add_common_options(run_parser, suppress_default=True)
    run_parser.add_argument("--installation-id", type=int, required=True)
    run_parser.add_argument("--owner", required=True)
    run_parser.add_argument("--repo", required=True)
    run_parser.add_argument(
        "--branch",
        default=None,
        help="Target branch (defaults to the repository default branch).",
    )

    return parser


async def run_once(
    settings: Settings,
    *,
    installation_id: int,
    owner: str,
    repo: str,
    branch: str | None = None,
    processor: RepositoryProcessor | None = None,
) -> RunOutcome:
    """Process a single repository outside the webhook flow.

    Without ``branch`` the processor resolves the default branch itself, in the
    same installation session it uses for the run.
    """
    processor = processor or RepositoryProcessor.from_settings(settings)
    context = ProcessingContext(installation_id=installation_id, owner=owner, repo=repo, branch=branch)
    return await processor.process(context)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docagent commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(config_path=getattr(args, "config", None))
    except ConfigError as exc:
        parser.exit(1, f"docagent: {exc}\n")

    log_file = getattr(args, "log_file", None) or settings.log_file
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(settings, host=args.host, port=args.port)
    elif args.command == "run":
        try:
            outcome = asyncio.run(
                run_once(
                    settings,
                    installation_id=args.installation_id,
                    owner=args.owner,
                    repo=args.repo,
                    branch=args.branch,
                )
            )
        except (ProcessingError, GitHubAPIError, httpx.HTTPError) as exc:
            parser.exit(1, f"docagent run failed: {exc}\nRun with --verbose for more details.\n")
        action = "created" if outcome.created else "updated"
        print(f"documentation.md {action} for {outcome.context.slug} ({outcome.file_count} files)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
