from datetime import timedelta

from conftest import epoch, utc
from location_tracks.models import RawPosition, TrackSegmentOptions
from location_tracks.tracks.tracker import Tracker


def test_simple_track() -> None:
    start = utc(2021, 5, 24, 0, 0)
    p1 = RawPosition.basic(-48.8702222, -26.31832, start)
    p2 = RawPosition.basic(-48.8619776, -26.3185919, start + timedelta(minutes=2))
    p3 = RawPosition.basic(-48.8619871, -26.3185861, start + timedelta(minutes=4))

    track = Tracker("my dev 1", "running in joinville", source="my app v0.1").build(
        [p3, p1, p2]
    )
    assert track.name == "running in joinville"
    assert track.description == "Tracked by `my dev 1`"
    assert track.source == "my app v0.1"
    assert len(track.segments) == 1
    points = track.segments[0].points
    assert [wp.point() for wp in points] == [p1.coordinates, p2.coordinates, p3.coordinates]
    assert [wp.time for wp in points] == [p1.time, p2.time, p3.time]


def test_segments_follow_buckets() -> None:
    positions = [RawPosition.basic(float(s), 0.0, epoch(s)) for s in (10, 290, 310, 1000)]
    track = Tracker("dev", "2021-05-24").build(positions)
    assert [s.bucket for s in track.segments] == [0, 300, 900]
    assert track.source is None


def test_simplification_applied_per_segment() -> None:
    coords = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.001), (3.0, 0.0), (3.0, 2.0)]
    positions = [RawPosition.basic(lon, lat, epoch(i)) for i, (lon, lat) in enumerate(coords)]
    options = TrackSegmentOptions(max_duration=300, vw_tolerance=0.01)
    track = Tracker("dev", "route", options=options).build(positions)
    assert [wp.point() for wp in track.segments[0].points] == [coords[0], coords[3], coords[4]]


def test_no_simplification_keeps_every_point() -> None:
    positions = [RawPosition.basic(0.0, 0.0, epoch(i)) for i in range(50)]
    track = Tracker("dev", "route").build(positions)
    assert sum(len(s.points) for s in track.segments) == 50


def test_empty_positions_give_empty_track() -> None:
    track = Tracker("dev", "route").build([])
    assert track.segments == []
    assert track.name == "route"
