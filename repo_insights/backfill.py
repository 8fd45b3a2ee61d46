#!/usr/bin/env python3
"""
Backfill of recent history for short datasets.
"""

import logging
from datetime import date, timedelta
from typing import Callable, List, Tuple

from .dataset import upsert_record
from .models import InsightRecord

DEFAULT_WINDOW_DAYS = 14


class BackfillPlanner:
    """
    Ensures the most recent window of days is present in a dataset.

    When fewer than window_days records were loaded, the days from
    today - window_days up to today - 2 are fetched and upserted, oldest
    first. Yesterday is left to the regular daily update. The check is
    all-or-nothing on the record count; gaps inside a longer history are
    not detected.
    """

    def __init__(self, window_days: int = DEFAULT_WINDOW_DAYS):
        if window_days < 2:
            raise ValueError(f"window_days must be at least 2, got {window_days}")
        self.window_days = window_days
        self.logger = logging.getLogger(__name__)

    def needs_backfill(self, record_count: int) -> bool:
        return record_count < self.window_days

    def target_dates(self, today: date) -> List[str]:
        return [
            (today - timedelta(days=offset)).isoformat()
            for offset in range(self.window_days, 1, -1)
        ]

    def backfill(self, records: List[InsightRecord], record_count: int, today: date,
                 fetch_record: Callable[[str], InsightRecord]) -> Tuple[List[InsightRecord], int]:
        """
        Upsert a fetched record for every target date if the dataset is short.

        Returns:
            The updated records and the number of upserts applied
        """
        if not self.needs_backfill(record_count):
            return records, 0

        self.logger.info(f"Dataset has {record_count} records, fewer than {self.window_days}.")
        self.logger.info(f"Ensuring the previous {self.window_days} days of data are present.")

        applied = 0
        for day in self.target_dates(today):
            records = upsert_record(records, fetch_record(day))
            applied += 1
        return records, applied
