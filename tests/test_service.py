from datetime import datetime, timedelta

import pytest

from conftest import make_position, utc
from location_tracks.errors import GroupingKeyError, SourceFetchError, TrackBuildError
from location_tracks.models import DevicePosition, RawPosition, TrackSegmentOptions
from location_tracks.sources.memory import MemorySource
from location_tracks.tracks.service import TrackService, build_tracks


class _FailingSource:
    def __init__(self, exc: Exception):
        self.exc = exc
        self.calls = 0

    def fetch(self, start, end):
        self.calls += 1
        raise self.exc


class _CountingSource(MemorySource):
    def __init__(self, positions):
        super().__init__(positions)
        self.calls = 0

    def fetch(self, start, end):
        self.calls += 1
        return super().fetch(start, end)


def test_three_points_one_day(three_minutes_of_positions, whole_day) -> None:
    tracks = build_tracks(MemorySource(three_minutes_of_positions), *whole_day)
    assert len(tracks) == 1
    (track,) = tracks
    assert track.name == "2021-05-24"
    assert track.description == "Tracked by `AAA`"
    assert len(track.segments) == 1
    assert len(track.segments[0].points) == 3


def test_two_devices_one_routed(whole_day) -> None:
    day = utc(2021, 5, 24, 9)
    positions = [
        make_position("dev2", 1, 1, day, route="delivery", application="fleet-app"),
        make_position("dev1", 0, 0, day),
        make_position("dev2", 1.1, 1.1, day + timedelta(minutes=1), route="delivery"),
        make_position("dev1", 0.1, 0.1, day + timedelta(minutes=1), application="tracker 2"),
    ]
    source = _CountingSource(positions)
    tracks = TrackService().build(source, *whole_day)
    assert source.calls == 1
    assert [(t.name, t.description, t.source) for t in tracks] == [
        ("2021-05-24", "Tracked by `dev1`", "tracker 2"),
        ("delivery", "Tracked by `dev2`", "fleet-app"),
    ]
    assert [len(t.segments[0].points) for t in tracks] == [2, 2]


def test_window_filters_positions() -> None:
    positions = [
        make_position("A", 0, 0, utc(2021, 5, 23, 23, 59)),
        make_position("A", 0, 0, utc(2021, 5, 24, 0, 0)),
        make_position("A", 0, 0, utc(2021, 5, 25, 0, 0)),
    ]
    tracks = build_tracks(MemorySource(positions), utc(2021, 5, 24), utc(2021, 5, 25))
    assert [t.name for t in tracks] == ["2021-05-24", "2021-05-25"]


def test_options_flow_to_trackers(whole_day) -> None:
    start = utc(2021, 5, 24, 10)
    positions = [make_position("A", i, 0, start + timedelta(seconds=i * 40)) for i in range(5)]
    tracks = build_tracks(MemorySource(positions), *whole_day, TrackSegmentOptions(max_duration=60))
    assert [len(s.points) for s in tracks[0].segments] == [2, 1, 2]


def test_empty_window_gives_no_tracks(whole_day) -> None:
    assert build_tracks(MemorySource([]), *whole_day) == []


def test_source_fetch_error_propagates(whole_day) -> None:
    source = _FailingSource(SourceFetchError("boom"))
    with pytest.raises(SourceFetchError, match="boom"):
        TrackService().build(source, *whole_day)
    assert source.calls == 1


def test_unexpected_source_error_is_wrapped(whole_day) -> None:
    with pytest.raises(SourceFetchError) as info:
        TrackService().build(_FailingSource(KeyError("time")), *whole_day)
    assert isinstance(info.value.__cause__, KeyError)


def test_naive_position_fails_grouping(whole_day) -> None:
    naive = DevicePosition("A", RawPosition.basic(0, 0, datetime(2021, 5, 24, 10)))

    class _Raw:
        def fetch(self, start, end):
            return [naive]

    with pytest.raises(GroupingKeyError):
        TrackService().build(_Raw(), *whole_day)


@pytest.mark.parametrize(
    "start, end",
    [
        (datetime(2021, 5, 24), utc(2021, 5, 25)),
        (utc(2021, 5, 25), utc(2021, 5, 24)),
    ],
)
def test_invalid_window_rejected(start, end) -> None:
    with pytest.raises(ValueError):
        TrackService().build(MemorySource([]), start, end)


def test_routed_naive_position_among_aware_ones(whole_day) -> None:
    aware = make_position("A", 0, 0, utc(2021, 5, 24, 10), route="r")
    naive = DevicePosition("A", RawPosition.basic(1, 1, datetime(2021, 5, 24, 10, 1)), route="r")

    class _Mixed:
        def fetch(self, start, end):
            return [aware, naive]

    with pytest.raises(TrackBuildError) as info:
        TrackService().build(_Mixed(), *whole_day)
    assert isinstance(info.value, GroupingKeyError)
