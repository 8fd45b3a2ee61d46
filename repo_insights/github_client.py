#!/usr/bin/env python3
"""
Thin GitHub API client.

Wraps a requests.Session and exposes the REST, GraphQL and git data calls
used to read metrics and to publish datasets. HTTP failures are translated
into NotFoundError (404) or RepositoryAccessError (everything else).
"""

import base64
import logging
import threading
from typing import Dict, List, Optional

import requests

from .errors import NotFoundError, RepositoryAccessError

GITHUB_API_URL = "https://api.github.com"


class GitHubClient:
    """Authenticated access to the GitHub REST and GraphQL APIs."""

    def __init__(self, token: str, api_url: str = GITHUB_API_URL, timeout: int = 30,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            token: GitHub token used for every request
            api_url: Base URL of the API (GitHub Enterprise installs differ)
            timeout: Per-request timeout in seconds
            session: Optional pre-built session shared by all threads, mainly for tests
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github.v3+json"
        }
        self._shared_session = session
        if session is not None:
            session.headers.update(self.headers)
        self._local = threading.local()
        self.logger = logging.getLogger(__name__)

    @property
    def session(self) -> requests.Session:
        """The session for the calling thread; requests sessions are not shared across threads."""
        if self._shared_session is not None:
            return self._shared_session

        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self.headers)
            self._local.session = session
        return session

    def _request(self, method: str, path: str, **kwargs) -> Dict:
        """Perform a request and return the decoded JSON body."""
        url = f"{self.api_url}/{path.lstrip('/')}"

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            self.logger.error(f"{method} {path} failed: {e}")
            raise RepositoryAccessError(f"{method} {path} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"{method} {path}: not found")

        if not response.ok:
            try:
                detail = response.json().get("message", response.reason)
            except ValueError:
                detail = response.reason
            self.logger.error(f"{method} {path} returned {response.status_code}: {detail}")
            raise RepositoryAccessError(
                f"{method} {path} returned {response.status_code}: {detail}",
                status=response.status_code,
            )

        return response.json()

    def get(self, path: str, **params) -> Dict:
        return self._request("GET", path, params=params or None)

    def post(self, path: str, payload: Dict) -> Dict:
        return self._request("POST", path, json=payload)

    def patch(self, path: str, payload: Dict) -> Dict:
        return self._request("PATCH", path, json=payload)

    def graphql(self, query: str, variables: Optional[Dict] = None) -> Dict:
        """Run a GraphQL query and return its ``data`` member."""
        result = self.post("graphql", {"query": query, "variables": variables or {}})
        if result.get("errors"):
            messages = "; ".join(error.get("message", str(error)) for error in result["errors"])
            raise RepositoryAccessError(f"GraphQL query failed: {messages}")
        return result["data"]

    # Git data API

    def get_ref(self, owner: str, repo: str, branch: str) -> str:
        """Return the commit sha a branch points at."""
        data = self.get(f"repos/{owner}/{repo}/git/ref/heads/{branch}")
        return data["object"]["sha"]

    def create_ref(self, owner: str, repo: str, branch: str, sha: str) -> None:
        self.post(f"repos/{owner}/{repo}/git/refs", {
            "ref": f"refs/heads/{branch}",
            "sha": sha
        })

    def update_ref(self, owner: str, repo: str, branch: str, sha: str, force: bool = False) -> None:
        self.patch(f"repos/{owner}/{repo}/git/refs/heads/{branch}", {
            "sha": sha,
            "force": force
        })

    def get_commit_tree(self, owner: str, repo: str, commit_sha: str) -> str:
        """Return the tree sha of a commit."""
        data = self.get(f"repos/{owner}/{repo}/git/commits/{commit_sha}")
        return data["tree"]["sha"]

    def create_blob(self, owner: str, repo: str, content: str) -> str:
        data = self.post(f"repos/{owner}/{repo}/git/blobs", {
            "content": content,
            "encoding": "utf-8"
        })
        return data["sha"]

    def create_tree(self, owner: str, repo: str, base_tree: str, path: str, blob_sha: str) -> str:
        """Create a tree that adds or replaces one regular file on top of base_tree."""
        data = self.post(f"repos/{owner}/{repo}/git/trees", {
            "base_tree": base_tree,
            "tree": [{
                "path": path,
                "mode": "100644",
                "type": "blob",
                "sha": blob_sha
            }]
        })
        return data["sha"]

    def create_commit(self, owner: str, repo: str, message: str, tree_sha: str,
                      parents: List[str]) -> str:
        data = self.post(f"repos/{owner}/{repo}/git/commits", {
            "message": message,
            "tree": tree_sha,
            "parents": parents
        })
        return data["sha"]

    # Contents API

    def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> str:
        """Return the text of a file at a ref."""
        data = self.get(f"repos/{owner}/{repo}/contents/{path}", ref=ref)

        if isinstance(data, list) or data.get("type") != "file":
            raise RepositoryAccessError(f"{path} on {ref} is not a file")

        # Files over 1 MB come back without inline content
        if data.get("encoding") != "base64" or not data.get("content"):
            if data.get("size", 0) == 0:
                return ""
            data = self.get(f"repos/{owner}/{repo}/git/blobs/{data['sha']}")

        return base64.b64decode(data["content"]).decode("utf-8")
