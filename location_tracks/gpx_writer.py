"""Serialise built tracks as a GPX 1.1 document using gpxpy."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, TextIO

import gpxpy.gpx

from .config import GPX_CREATOR
from .models import Track, TrackSegment, Waypoint

LOGGER = logging.getLogger(__name__)

GPX_VERSION = "1.1"


def _track_point(waypoint: Waypoint) -> gpxpy.gpx.GPXTrackPoint:
    # GPX 1.1 has no speed element; the value stays on the point object only.
    return gpxpy.gpx.GPXTrackPoint(
        latitude=waypoint.latitude,
        longitude=waypoint.longitude,
        elevation=waypoint.elevation,
        time=waypoint.time,
        speed=waypoint.speed,
    )


def _track_segment(segment: TrackSegment) -> gpxpy.gpx.GPXTrackSegment:
    gpx_segment = gpxpy.gpx.GPXTrackSegment()
    gpx_segment.points.extend(_track_point(p) for p in segment.points)
    return gpx_segment


def build_gpx(tracks: Iterable[Track], creator: str = GPX_CREATOR) -> gpxpy.gpx.GPX:
    """Return a GPX document with one ``<trk>`` per track, in input order."""

    gpx = gpxpy.gpx.GPX()
    gpx.creator = creator
    for track in tracks:
        gpx_track = gpxpy.gpx.GPXTrack(name=track.name, description=track.description)
        gpx_track.source = track.source
        gpx_track.segments.extend(_track_segment(s) for s in track.segments)
        gpx.tracks.append(gpx_track)
    return gpx


def write_gpx(
    tracks: Iterable[Track],
    destination: str | Path | TextIO,
    creator: str = GPX_CREATOR,
) -> None:
    """Write ``tracks`` as GPX XML to a file path or an open text stream."""

    gpx = build_gpx(tracks, creator=creator)
    xml = gpx.to_xml(version=GPX_VERSION)
    if isinstance(destination, (str, Path)):
        path = Path(destination)
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(xml)
        LOGGER.info("Wrote %d tracks to %s", len(gpx.tracks), path)
    else:
        destination.write(xml)
