#!/usr/bin/env python3
"""
Versioned file store backed by a branch of a GitHub repository.

Files are read through the contents API and written by building the git
objects directly: blob, tree on top of the current tree, commit on top of
the branch head, then a ref update. The branch is created from the base
branch the first time it is needed.
"""

import logging

from .errors import NotFoundError
from .github_client import GitHubClient


class GitDataStore:
    """Reads and publishes single files on branches of one storage repository."""

    def __init__(self, client: GitHubClient, owner: str, repo: str, base_branch: str = "main"):
        """
        Initialize the store.

        Args:
            client: GitHub client authenticated for the storage repository
            owner: Owner of the storage repository
            repo: Name of the storage repository
            base_branch: Branch new branches are created from
        """
        self.client = client
        self.owner = owner
        self.repo = repo
        self.base_branch = base_branch
        self.logger = logging.getLogger(__name__)

    def read(self, branch: str, path: str) -> str:
        """Return the file text. Raises NotFoundError when the file or branch is absent."""
        return self.client.get_file_content(self.owner, self.repo, path, branch)

    def ensure_branch(self, branch: str) -> bool:
        """
        Make sure a branch exists, creating it at the base branch head if needed.

        Returns:
            True if the branch was created, False if it already existed
        """
        try:
            self.client.get_ref(self.owner, self.repo, branch)
            return False
        except NotFoundError:
            self.logger.info(f"Branch '{branch}' not found in {self.owner}/{self.repo}")

        base_sha = self.client.get_ref(self.owner, self.repo, self.base_branch)
        self.client.create_ref(self.owner, self.repo, branch, base_sha)
        self.logger.info(f"Branch '{branch}' created from '{self.base_branch}' at {base_sha[:7]}.")
        return True

    def publish(self, branch: str, path: str, content: str, message: str) -> str:
        """
        Commit content to path on branch and move the branch to the new commit.

        The ref update is not forced, so a concurrent push to the branch makes
        it fail instead of silently discarding the other commit.

        Returns:
            The sha of the new commit
        """
        head_sha = self.client.get_ref(self.owner, self.repo, branch)
        tree_sha = self.client.get_commit_tree(self.owner, self.repo, head_sha)
        blob_sha = self.client.create_blob(self.owner, self.repo, content)
        new_tree_sha = self.client.create_tree(self.owner, self.repo, tree_sha, path, blob_sha)
        commit_sha = self.client.create_commit(self.owner, self.repo, message, new_tree_sha, [head_sha])
        self.client.update_ref(self.owner, self.repo, branch, commit_sha)

        self.logger.info(f"Committed {path} to '{branch}' as {commit_sha[:7]}")
        return commit_sha
