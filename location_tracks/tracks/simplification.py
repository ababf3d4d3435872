"""Visvalingam-Whyatt simplification of track segments.

Coordinates are treated as planar ``(longitude, latitude)`` pairs; no
projection is applied, so the tolerance is an area in squared degrees.
"""

from __future__ import annotations

import heapq
import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from ..models import TrackSegment

PointArray = NDArray[np.float64]


def _as_point_array(points: Iterable[Sequence[float]]) -> PointArray:
    array = np.asarray(list(points), dtype=float)
    if array.size == 0:
        return np.empty((0, 2), dtype=float)
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError("points must be a sequence of (x, y) pairs")
    return array


def triangle_areas(points: PointArray) -> NDArray[np.float64]:
    """Unsigned area of each triangle formed by consecutive point triples."""

    a = points[:-2]
    b = points[1:-1]
    c = points[2:]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (c[:, 0] - a[:, 0]) * (
        b[:, 1] - a[:, 1]
    )
    return np.abs(cross) / 2.0


def _triangle_area(points: PointArray, left: int, current: int, right: int) -> float:
    ax, ay = points[left]
    bx, by = points[current]
    cx, cy = points[right]
    return abs((bx - ax) * (cy - ay) - (cx - ax) * (by - ay)) / 2.0


def visvalingam_indices(
    points: Iterable[Sequence[float]], tolerance: float
) -> List[int]:
    """Return the indices kept by Visvalingam-Whyatt for ``tolerance``.

    The interior point with the smallest triangle area is removed while that
    area does not exceed ``tolerance``; the triangles of its two neighbours
    are then recomputed against their new neighbours. The first and last
    index are always kept and the result is ascending.

    Raises:
        ValueError: If ``tolerance`` is negative or not finite, or the points
            are not pairs.
    """

    if not math.isfinite(tolerance):
        raise ValueError(f"tolerance must be finite, got {tolerance}")
    if tolerance < 0:
        raise ValueError("tolerance must not be negative")
    array = _as_point_array(points)
    count = len(array)
    if count < 3:
        return list(range(count))

    # Doubly linked list over the indices still present.
    prev_idx = list(range(-1, count - 1))
    next_idx = list(range(1, count + 1))
    removed = [False] * count

    heap: List[Tuple[float, int, int, int]] = [
        (float(area), i + 1, i, i + 2) for i, area in enumerate(triangle_areas(array))
    ]
    heapq.heapify(heap)

    while heap:
        area, current, left, right = heapq.heappop(heap)
        if area > tolerance:
            break
        # Stale entry: a neighbour changed since this triangle was pushed.
        if removed[current] or prev_idx[current] != left or next_idx[current] != right:
            continue
        removed[current] = True
        next_idx[left] = right
        prev_idx[right] = left
        if left > 0:
            outer = prev_idx[left]
            heapq.heappush(
                heap, (_triangle_area(array, outer, left, right), left, outer, right)
            )
        if right < count - 1:
            outer = next_idx[right]
            heapq.heappush(
                heap, (_triangle_area(array, left, right, outer), right, left, outer)
            )

    return [i for i in range(count) if not removed[i]]


def simplify_segment(segment: TrackSegment, tolerance: float) -> TrackSegment:
    """Return a copy of ``segment`` holding only the retained waypoints."""

    kept = visvalingam_indices((wp.point() for wp in segment.points), tolerance)
    return TrackSegment(
        bucket=segment.bucket,
        points=[segment.points[i] for i in kept],
    )
