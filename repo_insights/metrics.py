#!/usr/bin/env python3
"""
Metrics source: repository totals and per-day traffic and clone counts.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Tuple

from .github_client import GitHubClient
from .models import DailyCount, InsightRecord, RepoStats

REPO_STATS_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    stargazerCount
    defaultBranchRef {
      target {
        ... on Commit {
          history(first: 100) {
            totalCount
            nodes {
              author {
                user {
                  login
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


class MetricsSource:
    """Reads metrics for a single tracked repository."""

    def __init__(self, client: GitHubClient, owner: str, repo: str):
        self.client = client
        self.owner = owner
        self.repo = repo
        self.logger = logging.getLogger(__name__)

    def get_stats(self) -> RepoStats:
        """
        Fetch stargazer, commit and contributor totals.

        Contributors are the distinct logins among the authors of the latest
        100 commits on the default branch; authors without a linked GitHub
        user are not counted.
        """
        data = self.client.graphql(REPO_STATS_QUERY, {"owner": self.owner, "name": self.repo})
        repository = data["repository"]
        history = repository["defaultBranchRef"]["target"]["history"]

        logins = {
            node["author"]["user"]["login"]
            for node in history["nodes"]
            if node.get("author") and node["author"].get("user")
        }

        return RepoStats(
            stargazers=repository["stargazerCount"],
            commits=history["totalCount"],
            contributors=len(logins),
        )

    def _daily_entry(self, kind: str, day: str) -> DailyCount:
        data = self.client.get(f"repos/{self.owner}/{self.repo}/traffic/{kind}", per="day")
        for entry in data.get(kind, []):
            if entry["timestamp"].split("T")[0] == day:
                return DailyCount.from_github_entry(entry)
        return DailyCount()

    def get_daily_traffic(self, day: str) -> DailyCount:
        """Page views for a day, or zero when the day is outside GitHub's retention window."""
        return self._daily_entry("views", day)

    def get_daily_clones(self, day: str) -> DailyCount:
        """Clones for a day, or zero when the day is outside GitHub's retention window."""
        return self._daily_entry("clones", day)

    def fetch_daily_counts(self, day: str) -> Tuple[DailyCount, DailyCount]:
        """Fetch traffic and clones for a day concurrently."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            traffic = executor.submit(self.get_daily_traffic, day)
            clones = executor.submit(self.get_daily_clones, day)
            return traffic.result(), clones.result()

    def build_record(self, day: str, stats: RepoStats) -> InsightRecord:
        traffic, clones = self.fetch_daily_counts(day)
        self.logger.debug(f"{day}: views {traffic}, clones {clones}")
        return InsightRecord.from_daily_counts(day, stats, traffic, clones)
