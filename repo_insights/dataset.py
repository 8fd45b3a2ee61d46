#!/usr/bin/env python3
"""
Loading, updating and saving the per-repository insights dataset.
"""

import logging
import posixpath
from dataclasses import dataclass
from typing import List, Tuple

from .errors import NotFoundError
from .models import InsightRecord
from .store import GitDataStore


@dataclass(frozen=True)
class StorageLocation:
    """Where one dataset lives: a branch and a file path inside it."""
    branch: str
    directory: str
    filename: str

    @property
    def path(self) -> str:
        return posixpath.join(self.directory, self.filename) if self.directory else self.filename

    @classmethod
    def for_repository(cls, branch: str, root_dir: str, owner: str, repo: str,
                       extension: str) -> 'StorageLocation':
        """Build the location <root_dir>/<owner>/<repo>/stats.<extension> on branch."""
        directory = posixpath.normpath(posixpath.join(root_dir or ".", owner, repo))
        return cls(branch=branch, directory=directory.lstrip("/"), filename=f"stats.{extension}")


def upsert_record(records: List[InsightRecord], record: InsightRecord) -> List[InsightRecord]:
    """
    Insert or replace a record keyed by date.

    A record with the same date is replaced at its current position,
    otherwise the record is appended. The input list is left untouched.
    """
    updated = list(records)
    for index, existing in enumerate(updated):
        if existing.date == record.date:
            updated[index] = record
            return updated
    updated.append(record)
    return updated


class DatasetRepository:
    """Reads and writes a dataset file through a GitDataStore using one codec."""

    def __init__(self, store: GitDataStore, codec):
        self.store = store
        self.codec = codec
        self.logger = logging.getLogger(__name__)

    def load(self, location: StorageLocation) -> Tuple[List[InsightRecord], int]:
        """
        Load the dataset at location.

        Returns:
            The records and their count. A missing file yields an empty
            dataset and a count of zero.
        """
        try:
            content = self.store.read(location.branch, location.path)
        except NotFoundError:
            self.logger.info(f"No stats file at {location.path} on '{location.branch}'. Creating a new file.")
            content = self.codec.empty_content()

        records = self.codec.decode(content)
        self.logger.info(f"Found {len(records)} existing records in {location.path}")
        return records, len(records)

    def save(self, location: StorageLocation, records: List[InsightRecord], message: str) -> str:
        """Encode the records and commit them to location. Returns the commit sha."""
        content = self.codec.encode(records)
        return self.store.publish(location.branch, location.path, content, message)
