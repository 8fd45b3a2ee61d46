#!/usr/bin/env python3
"""
Command-line interface for repo-insights.
"""

import argparse
import logging
import os
import sys
from typing import Optional

from .app import run_sync
from .config import load_configuration


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="repo-insights",
        description="GitHub repository insights collector"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Sync command
    sync_parser = subparsers.add_parser(
        "sync", help="Collect yesterday's metrics and commit them to the insights branch"
    )
    sync_parser.add_argument("--owner", help="Owner of the tracked repository")
    sync_parser.add_argument("--repository", help="Name of the tracked repository")
    sync_parser.add_argument(
        "--storage-repository",
        help="Repository (owner/repo) the stats file is committed to (default: GITHUB_REPOSITORY)"
    )
    sync_parser.add_argument("--branch", help="Branch holding the stats (default: repository-insights)")
    sync_parser.add_argument("--base-branch", help="Branch a new stats branch starts from (default: main)")
    sync_parser.add_argument("--directory", help="Root directory of the stats files (default: .insights)")
    sync_parser.add_argument("--format", choices=["json", "csv"], help="Stats file format (default: json)")

    return parser


CLI_INPUTS = {
    "owner": "owner",
    "repository": "repository",
    "storage_repository": "storage-repository",
    "branch": "branch",
    "base_branch": "base-branch",
    "directory": "directory",
    "format": "format",
}


def _load_with_overrides(args: argparse.Namespace):
    """Build the configuration with command-line options taking the place of action inputs."""
    environ = dict(os.environ)
    for option, input_name in CLI_INPUTS.items():
        value = getattr(args, option, None)
        if value:
            environ[f"INPUT_{input_name.upper()}"] = value
    return load_configuration(environ)


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if args.command == "sync":
        try:
            config = _load_with_overrides(args)
        except ValueError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 1
        try:
            success, message = run_sync(config)
        except KeyboardInterrupt:
            print("\nOperation cancelled by user")
            return 1
        if not success:
            print(message, file=sys.stderr)
            return 1
        return 0
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
