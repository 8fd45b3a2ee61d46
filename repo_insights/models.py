#!/usr/bin/env python3
"""
Data models for repository insights.

Contains the core data classes used throughout the application.
"""

from dataclasses import dataclass, fields
from datetime import date
from typing import Dict, List


@dataclass
class DailyCount:
    """A single day of traffic or clone activity: total count and unique visitors."""
    count: int = 0
    uniques: int = 0

    def __str__(self) -> str:
        return f"{self.count} ({self.uniques} unique)"

    @classmethod
    def from_github_entry(cls, entry: Dict[str, any]) -> 'DailyCount':
        """Create a DailyCount from a GitHub traffic API response entry."""
        return cls(entry["count"], entry["uniques"])


@dataclass
class RepoStats:
    """Totals for a repository at the time of the run."""
    stargazers: int
    commits: int
    contributors: int


@dataclass
class InsightRecord:
    """One calendar day of metrics. The date is the natural key of a dataset."""
    date: str
    stargazers: int
    commits: int
    contributors: int
    traffic_views: int
    traffic_uniques: int
    clones_count: int
    clones_uniques: int

    def __post_init__(self):
        # Stored in YYYY-MM-DD form so equal days compare equal as strings
        self.date = date.fromisoformat(self.date).isoformat()
        for name in COLUMNS[1:]:
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @classmethod
    def from_daily_counts(cls, day: str, stats: RepoStats,
                          traffic: DailyCount, clones: DailyCount) -> 'InsightRecord':
        """Combine the repository totals with one day's traffic and clone counts."""
        return cls(
            date=day,
            stargazers=stats.stargazers,
            commits=stats.commits,
            contributors=stats.contributors,
            traffic_views=traffic.count,
            traffic_uniques=traffic.uniques,
            clones_count=clones.count,
            clones_uniques=clones.uniques,
        )

    def to_dict(self) -> Dict[str, any]:
        return {name: getattr(self, name) for name in COLUMNS}

    def to_row(self) -> List[str]:
        return [str(getattr(self, name)) for name in COLUMNS]


# Persisted column order
COLUMNS = [f.name for f in fields(InsightRecord)]
