"""Split time-ordered positions into fixed-width time-bucket segments."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, Iterable, List

from ..models import RawPosition, TrackSegment, Waypoint


def bucket_key(time: datetime, max_duration: int) -> int:
    """Return the start (unix seconds) of the window holding ``time``.

    Windows are ``max_duration`` seconds wide and aligned on the epoch, so
    two samples exactly ``max_duration`` apart never share a bucket.
    """

    duration = max(1, int(max_duration))
    return math.floor(time.timestamp() / duration) * duration


def segment_positions(
    positions: Iterable[RawPosition], max_duration: int
) -> List[TrackSegment]:
    """Sort positions by time and split them into bucket-aligned segments.

    Equal timestamps keep their input order. Segments are returned in
    ascending bucket order; empty buckets produce no segment.
    """

    ordered = sorted(positions, key=lambda p: p.time)
    by_bucket: Dict[int, TrackSegment] = {}
    for position in ordered:
        key = bucket_key(position.time, max_duration)
        segment = by_bucket.get(key)
        if segment is None:
            segment = by_bucket[key] = TrackSegment(bucket=key)
        segment.points.append(Waypoint.from_position(position))
    return [by_bucket[key] for key in sorted(by_bucket)]
