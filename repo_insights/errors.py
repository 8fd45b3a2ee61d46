#!/usr/bin/env python3
"""
Exception types raised while collecting and publishing repository insights.
"""


class InsightsError(Exception):
    """Base class for all repo-insights failures."""


class RepositoryAccessError(InsightsError):
    """A GitHub call failed (auth, permissions, rate limit, network)."""

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status


class NotFoundError(RepositoryAccessError):
    """The requested branch, ref or file does not exist."""

    def __init__(self, message: str):
        super().__init__(message, status=404)


class MalformedDataError(InsightsError):
    """The stored dataset does not match its declared format."""


class UnsupportedFormatError(InsightsError, ValueError):
    """The configured dataset format is neither json nor csv."""
