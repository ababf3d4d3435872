"""Central error types used across the application."""

from __future__ import annotations


class TrackBuildError(RuntimeError):
    """Base error for failures while turning positions into tracks."""


class SourceFetchError(TrackBuildError):
    """Raised when a position source cannot produce samples for a window."""


class GroupingKeyError(TrackBuildError):
    """Raised when a route-or-day key cannot be derived from a position."""


class ConfigFileError(TrackBuildError):
    """Raised when a configuration file exists but cannot be read or parsed."""


__all__ = [
    "TrackBuildError",
    "SourceFetchError",
    "GroupingKeyError",
    "ConfigFileError",
]
