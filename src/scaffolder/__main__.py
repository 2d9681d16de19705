"""CLI entry point for scaffolder."""

import argparse
from pathlib import Path
from typing import Any

from . import __version__
from .config import Settings
from .logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="scaffolder",
        description="Publish a rendered template workspace as a new Bitbucket Server repository",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to scaffolder.yml (default: ./scaffolder.yml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    publish = commands.add_parser(
        "publish",
        help="Create the repository and push the workspace to it",
    )
    publish.add_argument(
        "--repo-url",
        required=True,
        help="Target location, e.g. bitbucket.mycompany.com?project=PRJ&repo=my-service",
    )
    publish.add_argument(
        "--workspace",
        type=Path,
        default=Path(),
        help="Directory holding the content to push (default: current directory)",
    )
    publish.add_argument(
        "--visibility",
        choices=["private", "public"],
        default="private",
        help="Repository visibility (default: private)",
    )
    publish.add_argument("--default-branch", default=None, help="Branch to push (default: master)")
    publish.add_argument("--enable-lfs", action="store_true", help="Enable git LFS on the repository")
    publish.add_argument("--token", default=None, help="Token overriding the integration's token")
    publish.add_argument("--description", default=None, help="Repository description")
    publish.add_argument(
        "--source-path",
        default=None,
        help="Subdirectory of the workspace to push instead of the whole workspace",
    )
    publish.add_argument("--commit-message", default=None, help="Message of the initial commit")
    publish.add_argument("--author-name", default=None, help="Author name of the initial commit")
    publish.add_argument("--author-email", default=None, help="Author email of the initial commit")

    generate = commands.add_parser(
        "generate",
        help="Write a starter scaffolder.yml and exit",
    )
    generate.add_argument(
        "--host",
        default=None,
        help="Bitbucket Server host to add as an integration entry",
    )

    return parser


def _publish_values(args: argparse.Namespace) -> dict[str, Any]:
    """Map CLI flags onto the action's input field names."""
    values: dict[str, Any] = {
        "repoUrl": args.repo_url,
        "repoVisibility": args.visibility,
        "enableLFS": args.enable_lfs,
    }
    optional = {
        "defaultBranch": args.default_branch,
        "token": args.token,
        "description": args.description,
        "sourcePath": args.source_path,
        "gitCommitMessage": args.commit_message,
        "gitAuthorName": args.author_name,
        "gitAuthorEmail": args.author_email,
    }
    values.update({key: value for key, value in optional.items() if value is not None})
    return values


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Build settings from CLI args; unset flags fall back to SCAFFOLDER_* env vars
    settings_kwargs: dict = {}
    if args.config:
        settings_kwargs["config_path"] = args.config
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)

    setup_logging(settings.verbose, settings.log_file)

    if args.command == "generate":
        from .cli.generate import run_generate

        raise SystemExit(run_generate(settings.config_path, args.host))

    from .cli.publish import run_publish

    exit_code = run_publish(
        settings.config_path,
        args.workspace,
        _publish_values(args),
        http_timeout=settings.http_timeout,
    )
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
