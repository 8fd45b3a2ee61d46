"""
Shared pytest fixtures for the repo-insights test suite.

FakeGitHost keeps refs, commits, trees and blobs in memory and implements
the git data surface of GitHubClient, so store and tracker tests run offline.
"""

import hashlib
import itertools
from datetime import date

import pytest

from repo_insights.errors import NotFoundError
from repo_insights.models import InsightRecord, RepoStats


class FakeGitHost:
    """In-memory stand-in for one GitHub repository's git data API."""

    def __init__(self, branches=("main",)):
        self._ids = itertools.count()
        self.blobs = {}
        self.trees = {}
        self.commits = {}
        self.refs = {}
        self.calls = []

        root_tree = self._new_sha("tree")
        self.trees[root_tree] = {"README.md": self._store_blob("# storage\n")}
        root_commit = self._new_sha("commit")
        self.commits[root_commit] = {"tree": root_tree, "parents": [], "message": "Initial commit"}
        for branch in branches:
            self.refs[branch] = root_commit

    def _new_sha(self, kind):
        return hashlib.sha1(f"{kind}-{next(self._ids)}".encode()).hexdigest()

    def _store_blob(self, content):
        sha = self._new_sha("blob")
        self.blobs[sha] = content
        return sha

    def get_ref(self, owner, repo, branch):
        self.calls.append("get_ref")
        if branch not in self.refs:
            raise NotFoundError(f"heads/{branch}: not found")
        return self.refs[branch]

    def create_ref(self, owner, repo, branch, sha):
        self.calls.append("create_ref")
        self.refs[branch] = sha

    def update_ref(self, owner, repo, branch, sha, force=False):
        self.calls.append("update_ref")
        self.refs[branch] = sha

    def get_commit_tree(self, owner, repo, commit_sha):
        self.calls.append("get_commit_tree")
        return self.commits[commit_sha]["tree"]

    def create_blob(self, owner, repo, content):
        self.calls.append("create_blob")
        return self._store_blob(content)

    def create_tree(self, owner, repo, base_tree, path, blob_sha):
        self.calls.append("create_tree")
        sha = self._new_sha("tree")
        self.trees[sha] = dict(self.trees[base_tree], **{path: blob_sha})
        return sha

    def create_commit(self, owner, repo, message, tree_sha, parents):
        self.calls.append("create_commit")
        sha = self._new_sha("commit")
        self.commits[sha] = {"tree": tree_sha, "parents": list(parents), "message": message}
        return sha

    def get_file_content(self, owner, repo, path, ref):
        self.calls.append("get_file_content")
        if ref not in self.refs:
            raise NotFoundError(f"No commit found for the ref {ref}")
        tree = self.trees[self.commits[self.refs[ref]]["tree"]]
        if path not in tree:
            raise NotFoundError(f"{path}: not found")
        return self.blobs[tree[path]]

    def file_at(self, branch, path):
        """Test helper: the content of path at the head of branch."""
        return self.get_file_content(None, None, path, branch)

    def put_file(self, branch, path, content):
        """Test helper: commit a file directly onto a branch."""
        head = self.refs[branch]
        tree = self.create_tree(None, None, self.commits[head]["tree"], path, self._store_blob(content))
        self.refs[branch] = self.create_commit(None, None, "seed", tree, [head])
        self.calls.clear()


class FakeMetrics:
    """Metrics source returning deterministic records and counting fetches."""

    def __init__(self, stats=None, views=3, clones=1):
        self.stats = stats or RepoStats(stargazers=12, commits=40, contributors=3)
        self.views = views
        self.clones = clones
        self.fetched_days = []

    def get_stats(self):
        return self.stats

    def build_record(self, day, stats):
        self.fetched_days.append(day)
        return InsightRecord(
            date=day,
            stargazers=stats.stargazers,
            commits=stats.commits,
            contributors=stats.contributors,
            traffic_views=self.views,
            traffic_uniques=self.views,
            clones_count=self.clones,
            clones_uniques=self.clones,
        )


def make_record(day, stargazers=10, **overrides):
    values = dict(
        stargazers=stargazers, commits=5, contributors=2,
        traffic_views=7, traffic_uniques=4, clones_count=2, clones_uniques=1,
    )
    values.update(overrides)
    return InsightRecord(date=day, **values)


@pytest.fixture
def git_host():
    return FakeGitHost()


@pytest.fixture
def fake_metrics():
    return FakeMetrics()


@pytest.fixture
def today():
    return date(2024, 1, 20)
