"""Grouping, segmentation, simplification and track assembly."""

from .grouping import group_positions, route_key
from .segmentation import bucket_key, segment_positions
from .simplification import simplify_segment, visvalingam_indices
from .tracker import Tracker
from .service import TrackService, build_tracks

__all__ = [
    "group_positions",
    "route_key",
    "bucket_key",
    "segment_positions",
    "simplify_segment",
    "visvalingam_indices",
    "Tracker",
    "TrackService",
    "build_tracks",
]
