#!/usr/bin/env python3
"""
Configuration loading.

Options are read from GitHub Actions inputs (INPUT_<NAME> variables) first,
then from plain environment variables, so the same code runs as an action
step or from a shell.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .codec import get_codec


@dataclass(frozen=True)
class InsightsConfig:
    """Everything a run needs, resolved once at startup."""
    github_token: str
    owner: str
    repository: str
    storage_owner: str
    storage_repository: str
    storage_token: Optional[str] = None
    branch: str = "repository-insights"
    base_branch: str = "main"
    directory: str = ".insights"
    format: str = "json"

    def __post_init__(self):
        # Fails with UnsupportedFormatError before anything touches GitHub
        get_codec(self.format)

    @property
    def storage_credentials(self) -> str:
        return self.storage_token or self.github_token


def _get_input(environ: Mapping[str, str], name: str, fallback: Optional[str] = None,
               default: Optional[str] = None) -> Optional[str]:
    """Read an action input, then a fallback variable, ignoring blank values."""
    candidates = [f"INPUT_{name.upper()}", f"INPUT_{name.upper().replace('-', '_')}"]
    if fallback:
        candidates.append(fallback)
    for key in candidates:
        value = environ.get(key, "").strip()
        if value:
            return value
    return default


def split_repository(full_name: str) -> Tuple[str, str]:
    """Split 'owner/repo' into its parts."""
    owner, _, repo = full_name.strip().strip("/").partition("/")
    if not owner or not repo or "/" in repo:
        raise ValueError(f"Expected a repository in 'owner/repo' form, got {full_name!r}")
    return owner, repo


def load_configuration(environ: Optional[Mapping[str, str]] = None) -> InsightsConfig:
    """Load configuration from action inputs and environment variables."""
    environ = os.environ if environ is None else environ

    github_token = _get_input(environ, "github-token", "GITHUB_TOKEN")
    if not github_token:
        raise ValueError("GitHub token not set. Provide the github-token input or GITHUB_TOKEN.")

    owner = _get_input(environ, "owner", "INSIGHTS_OWNER")
    if not owner:
        raise ValueError("owner input (or INSIGHTS_OWNER) not set.")

    repository = _get_input(environ, "repository", "INSIGHTS_REPOSITORY")
    if not repository:
        raise ValueError("repository input (or INSIGHTS_REPOSITORY) not set.")

    storage = _get_input(environ, "storage-repository", "GITHUB_REPOSITORY")
    if not storage:
        raise ValueError("storage-repository input (or GITHUB_REPOSITORY) not set.")
    storage_owner, storage_repository = split_repository(storage)

    return InsightsConfig(
        github_token=github_token,
        storage_token=_get_input(environ, "storage-token"),
        owner=owner,
        repository=repository,
        storage_owner=storage_owner,
        storage_repository=storage_repository,
        branch=_get_input(environ, "branch", "INSIGHTS_BRANCH", "repository-insights"),
        base_branch=_get_input(environ, "base-branch", "INSIGHTS_BASE_BRANCH", "main"),
        directory=_get_input(environ, "directory", "INSIGHTS_DIRECTORY", ".insights"),
        format=_get_input(environ, "format", "INSIGHTS_FORMAT", "json").lower(),
    )
