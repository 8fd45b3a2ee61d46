"""
GitHub Repository Insights Tracker

Collects repository metrics and keeps their daily history in a stats file
committed to a branch of a git repository.
"""

__version__ = "1.0.0"

from .app import InsightsTracker, run_sync
from .backfill import BackfillPlanner
from .codec import get_codec
from .dataset import DatasetRepository, StorageLocation, upsert_record
from .models import InsightRecord
from .store import GitDataStore

__all__ = [
    "InsightsTracker",
    "BackfillPlanner",
    "DatasetRepository",
    "GitDataStore",
    "InsightRecord",
    "StorageLocation",
    "get_codec",
    "upsert_record",
    "run_sync",
]
