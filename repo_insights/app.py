#!/usr/bin/env python3
"""
GitHub Repository Insights Tracker

Collects stargazer, commit, contributor, traffic and clone metrics for a
repository and keeps a daily history of them in a stats file committed to a
dedicated branch of a storage repository.
"""

import logging
import os
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from .backfill import BackfillPlanner
from .codec import get_codec
from .config import InsightsConfig, load_configuration
from .dataset import DatasetRepository, StorageLocation, upsert_record
from .github_client import GitHubClient
from .metrics import MetricsSource
from .models import RepoStats
from .store import GitDataStore


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class InsightsTracker:
    """Runs one collection cycle for the configured repository."""

    def __init__(self, config: InsightsConfig, metrics: MetricsSource, store: GitDataStore,
                 planner: Optional[BackfillPlanner] = None, today: Optional[date] = None):
        """
        Initialize the tracker.

        Args:
            config: Resolved run configuration
            metrics: Source of repository metrics
            store: Versioned file store for the storage repository
            planner: Backfill planner (defaults to a 14 day window)
            today: Date the run is considered to happen on (UTC today if None)
        """
        self.config = config
        self.metrics = metrics
        self.store = store
        self.planner = planner or BackfillPlanner()
        self.today = today or utc_today()
        self.codec = get_codec(config.format)
        self.dataset = DatasetRepository(store, self.codec)
        self.location = StorageLocation.for_repository(
            config.branch, config.directory, config.owner, config.repository, self.codec.extension
        )
        self.logger = logging.getLogger(__name__)

    @property
    def commit_message(self) -> str:
        return f"Update stats file for {self.config.owner}/{self.config.repository}"

    def run(self) -> Dict[str, int]:
        """
        Collect yesterday's metrics and publish the updated dataset.

        Returns:
            The named results of the run
        """
        repo_name = f"{self.config.owner}/{self.config.repository}"
        self.logger.info(f"Collecting insights for {repo_name}")

        stats = self.metrics.get_stats()

        self.store.ensure_branch(self.config.branch)
        records, record_count = self.dataset.load(self.location)

        records, _ = self.planner.backfill(
            records, record_count, self.today,
            lambda day: self.metrics.build_record(day, stats)
        )

        yesterday = (self.today - timedelta(days=1)).isoformat()
        record = self.metrics.build_record(yesterday, stats)
        records = upsert_record(records, record)

        outputs = build_outputs(stats, record)
        log_results(outputs)

        self.dataset.save(self.location, records, self.commit_message)
        self.logger.info(f"Update for {repo_name} completed successfully")
        return outputs


def build_outputs(stats: RepoStats, record) -> Dict[str, int]:
    return {
        "stargazers": stats.stargazers,
        "commits": stats.commits,
        "contributors": stats.contributors,
        "traffic_views": record.traffic_views,
        "traffic_uniques": record.traffic_uniques,
        "clones_count": record.clones_count,
        "clones_uniques": record.clones_uniques,
    }


def log_results(outputs: Dict[str, int]) -> None:
    logger = logging.getLogger(__name__)
    logger.info(f"Total Stargazers: {outputs['stargazers']}")
    logger.info(f"Total Commits: {outputs['commits']}")
    logger.info(f"Total Contributors: {outputs['contributors']}")
    logger.info(f"Total Views Yesterday: {outputs['traffic_views']}")
    logger.info(f"Total Unique Views Yesterday: {outputs['traffic_uniques']}")
    logger.info(f"Total Clones Yesterday: {outputs['clones_count']}")
    logger.info(f"Total Unique Clones Yesterday: {outputs['clones_uniques']}")


def set_outputs(outputs: Dict[str, int], output_path: Optional[str] = None) -> None:
    """Append the results to the GitHub Actions output file, if there is one."""
    output_path = output_path or os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")


def report_failure(message: str) -> None:
    """Emit a workflow error annotation when running under GitHub Actions."""
    if os.environ.get("GITHUB_ACTIONS", "").lower() == "true":
        print(f"::error::{message}")


def build_tracker(config: InsightsConfig, today: Optional[date] = None) -> InsightsTracker:
    """Wire the GitHub clients, metrics source and store for a configuration."""
    metrics_client = GitHubClient(config.github_token)
    if config.storage_credentials == config.github_token:
        storage_client = metrics_client
    else:
        storage_client = GitHubClient(config.storage_credentials)

    metrics = MetricsSource(metrics_client, config.owner, config.repository)
    store = GitDataStore(storage_client, config.storage_owner, config.storage_repository,
                         base_branch=config.base_branch)
    return InsightsTracker(config, metrics, store, today=today)


def run_sync(config: Optional[InsightsConfig] = None) -> Tuple[bool, str]:
    """Runs one insights collection and reports the outcome."""
    logger = logging.getLogger(__name__)
    try:
        config = config or load_configuration()
        outputs = build_tracker(config).run()
        set_outputs(outputs)
        logger.info("Sync successful")
        return True, "Sync successful"
    except Exception as e:
        message = f"Action failed with error: {e}"
        logger.error(message)
        report_failure(message)
        return False, message
