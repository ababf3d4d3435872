"""Assemble a single named track from one group's positions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..models import RawPosition, Track, TrackSegmentOptions
from .segmentation import segment_positions
from .simplification import simplify_segment


@dataclass(frozen=True, slots=True)
class Tracker:
    """Track builder for one device and one route or day.

    Attributes:
        device: Device identifier, used in the track description.
        name: Route label or ``YYYY-MM-DD`` date of the group.
        source: Application that recorded the positions, if known.
        options: Segment width and optional simplification tolerance.
    """

    device: str
    name: str
    source: Optional[str] = None
    options: TrackSegmentOptions = field(default_factory=TrackSegmentOptions)

    @property
    def description(self) -> str:
        return f"Tracked by `{self.device}`"

    def build(self, positions: Sequence[RawPosition]) -> Track:
        """Build the track; an empty ``positions`` gives a track with no segments."""

        track = Track(name=self.name, description=self.description, source=self.source)
        tolerance = self.options.vw_tolerance
        for segment in segment_positions(positions, self.options.max_duration):
            if tolerance is not None:
                segment = simplify_segment(segment, tolerance)
            track.segments.append(segment)
        return track
