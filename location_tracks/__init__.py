"""Build GPX tracks from device position samples."""

from .models import (
    DevicePosition,
    FieldsConfiguration,
    RawPosition,
    Track,
    TrackSegment,
    TrackSegmentOptions,
    Waypoint,
)
from .errors import ConfigFileError, GroupingKeyError, SourceFetchError, TrackBuildError
from .tracks import TrackService, Tracker, build_tracks

__all__ = [
    "DevicePosition",
    "FieldsConfiguration",
    "RawPosition",
    "Track",
    "TrackSegment",
    "TrackSegmentOptions",
    "Waypoint",
    "ConfigFileError",
    "GroupingKeyError",
    "SourceFetchError",
    "TrackBuildError",
    "TrackService",
    "Tracker",
    "build_tracks",
]
