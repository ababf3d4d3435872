from datetime import timedelta, timezone

from conftest import epoch, utc
from location_tracks.models import RawPosition
from location_tracks.tracks.segmentation import bucket_key, segment_positions


def _raw(seconds: float, lon: float = 0.0) -> RawPosition:
    return RawPosition.basic(lon, 0.0, epoch(seconds))


def test_bucket_key_is_epoch_aligned() -> None:
    assert bucket_key(epoch(0), 300) == 0
    assert bucket_key(epoch(299), 300) == 0
    assert bucket_key(epoch(300), 300) == 300
    assert bucket_key(epoch(1_621_850_461), 300) == 1_621_850_400


def test_bucket_key_clamps_duration() -> None:
    assert bucket_key(epoch(17), 0) == 17


def test_samples_exactly_max_duration_apart_split() -> None:
    segments = segment_positions([_raw(600), _raw(900)], 300)
    assert [s.bucket for s in segments] == [600, 900]


def test_gap_skips_empty_bucket() -> None:
    positions = [_raw(10), _raw(200), _raw(350), _raw(950), _raw(1100)]
    segments = segment_positions(positions, 300)
    assert [s.bucket for s in segments] == [0, 300, 900]
    assert [len(s.points) for s in segments] == [2, 1, 2]


def test_points_sorted_by_time_with_stable_ties() -> None:
    positions = [_raw(50, lon=3), _raw(10, lon=1), _raw(50, lon=2), _raw(20, lon=4)]
    (segment,) = segment_positions(positions, 300)
    assert [p.longitude for p in segment.points] == [1, 4, 3, 2]


def test_three_points_two_minutes_apart_share_segment(three_minutes_of_positions) -> None:
    raw = [p.position for p in three_minutes_of_positions]
    segments = segment_positions(raw, 300)
    assert len(segments) == 1
    assert len(segments[0].points) == 3


def test_empty_input_gives_no_segments() -> None:
    assert segment_positions([], 300) == []


def test_offset_timestamps_bucket_on_instant() -> None:
    base = utc(2021, 5, 24, 10, 2)
    local = base.astimezone(timezone(timedelta(hours=-3)))
    assert bucket_key(local, 300) == bucket_key(base, 300) == int(utc(2021, 5, 24, 10).timestamp())
