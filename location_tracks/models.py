"""Dataclasses describing positions, segmentation options and built tracks."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

LonLat = Tuple[float, float]

DEFAULT_MAX_DURATION = 300


@dataclass(frozen=True, slots=True)
class RawPosition:
    """A single sampled location.

    Attributes:
        longitude: Longitude in decimal degrees.
        latitude: Latitude in decimal degrees.
        time: Timezone-aware sample instant.
        speed: Speed in metres/second, when the source reports one.
        altitude: Altitude in metres, when the source reports one.
    """

    longitude: float
    latitude: float
    time: datetime
    speed: Optional[float] = None
    altitude: Optional[float] = None

    @classmethod
    def basic(cls, longitude: float, latitude: float, time: datetime) -> "RawPosition":
        """Position with coordinates and time only."""

        return cls(longitude=longitude, latitude=latitude, time=time)

    @property
    def coordinates(self) -> LonLat:
        return (self.longitude, self.latitude)

    @property
    def unix_seconds(self) -> float:
        """Unix epoch seconds as float."""

        return self.time.timestamp()


@dataclass(frozen=True, slots=True)
class DevicePosition:
    """A raw position attributed to a device.

    ``device_id`` and the route-or-day key define which track the sample
    belongs to. ``application`` names the app that recorded it, if known.
    """

    device_id: str
    position: RawPosition
    route: Optional[str] = None
    application: Optional[str] = None

    @classmethod
    def basic(
        cls, device_id: str, longitude: float, latitude: float, time: datetime
    ) -> "DevicePosition":
        return cls(device_id=device_id, position=RawPosition.basic(longitude, latitude, time))

    @property
    def time(self) -> datetime:
        return self.position.time


@dataclass(frozen=True, slots=True)
class TrackSegmentOptions:
    """Segmentation and simplification settings.

    ``max_duration`` below 1 is clamped to 1 rather than rejected. A
    ``vw_tolerance`` of ``None`` disables simplification.
    """

    max_duration: int = DEFAULT_MAX_DURATION
    vw_tolerance: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_duration", max(1, int(self.max_duration)))
        if self.vw_tolerance is not None:
            tolerance = float(self.vw_tolerance)
            if not math.isfinite(tolerance):
                raise ValueError(f"vw_tolerance must be finite, got {tolerance}")
            if tolerance < 0:
                raise ValueError("vw_tolerance must not be negative")
            object.__setattr__(self, "vw_tolerance", tolerance)

    @property
    def simplification_enabled(self) -> bool:
        return self.vw_tolerance is not None


@dataclass(frozen=True, slots=True)
class FieldsConfiguration:
    """Column / document field names read by the position sources."""

    device_id: str = "device"
    time: str = "time"
    coordinates: str = "coordinates"
    route: str = "route"
    speed: str = "speed"
    elevation: str = "elevation"
    application: str = "application"
    flip_coordinates: bool = False


@dataclass(frozen=True, slots=True)
class Waypoint:
    """One exported track point."""

    longitude: float
    latitude: float
    time: Optional[datetime] = None
    elevation: Optional[float] = None
    speed: Optional[float] = None

    @classmethod
    def from_position(cls, position: RawPosition) -> "Waypoint":
        return cls(
            longitude=position.longitude,
            latitude=position.latitude,
            time=position.time,
            elevation=position.altitude,
            speed=position.speed,
        )

    def point(self) -> LonLat:
        return (self.longitude, self.latitude)


@dataclass(slots=True)
class TrackSegment:
    """Waypoints sharing one time bucket, in chronological order."""

    bucket: Optional[int] = None
    points: List[Waypoint] = field(default_factory=list)


@dataclass(slots=True)
class Track:
    name: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    segments: List[TrackSegment] = field(default_factory=list)
