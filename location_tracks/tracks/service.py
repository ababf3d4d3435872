"""Track building service.

Fetches one batch of positions from a source, groups it per device and
route-or-day, and hands each group to a ``Tracker``. The output order is the
ascending group key order produced by ``group_positions``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from ..errors import SourceFetchError
from ..models import DevicePosition, Track, TrackSegmentOptions
from ..sources.base import PositionsSource
from ..utils import is_aware
from .grouping import group_positions
from .tracker import Tracker


def _first_application(members: Sequence[DevicePosition]) -> Optional[str]:
    for member in members:
        if member.application:
            return member.application
    return None


class TrackService:
    def __init__(
        self,
        options: TrackSegmentOptions | None = None,
        logger: logging.Logger | None = None,
    ):
        self.options = options or TrackSegmentOptions()
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def _fetch(
        self, source: PositionsSource, start: datetime, end: datetime
    ) -> List[DevicePosition]:
        try:
            return list(source.fetch(start, end))
        except SourceFetchError:
            raise
        except Exception as exc:
            raise SourceFetchError(
                f"Failed to fetch positions between {start} and {end}: {exc}"
            ) from exc

    def build(
        self, source: PositionsSource, start: datetime, end: datetime
    ) -> List[Track]:
        """Build one track per (device, route-or-day) group in the window.

        Raises:
            ValueError: If a bound is naive or ``start`` is after ``end``.
            SourceFetchError: If the source fails; no partial output is built.
            GroupingKeyError: If a group key cannot be derived.
        """

        if not (is_aware(start) and is_aware(end)):
            raise ValueError("start and end must be timezone-aware")
        if start > end:
            raise ValueError(f"start {start} is after end {end}")

        positions = self._fetch(source, start, end)
        groups = group_positions(positions)
        self._log.info(
            "Fetched %d positions between %s and %s into %d groups",
            len(positions),
            start,
            end,
            len(groups),
        )

        tracks: List[Track] = []
        for (device, key), members in groups.items():
            tracker = Tracker(
                device=device,
                name=key,
                source=_first_application(members),
                options=self.options,
            )
            track = tracker.build([member.position for member in members])
            self._log.debug(
                "Track %s for device %s: %d positions, %d segments",
                key,
                device,
                len(members),
                len(track.segments),
            )
            tracks.append(track)
        return tracks


def build_tracks(
    source: PositionsSource,
    start: datetime,
    end: datetime,
    options: TrackSegmentOptions | None = None,
) -> List[Track]:
    """Convenience wrapper around ``TrackService(options).build``."""

    return TrackService(options).build(source, start, end)
