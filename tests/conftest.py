"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable position factories and a
fake MongoDB collection shared across test files.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from location_tracks.models import DevicePosition, RawPosition


# --- Factory helpers -------------------------------------------------
def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def epoch(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def make_position(
    device: str,
    lon: float,
    lat: float,
    time: datetime,
    route: str | None = None,
    application: str | None = None,
) -> DevicePosition:
    return DevicePosition(
        device_id=device,
        position=RawPosition.basic(lon, lat, time),
        route=route,
        application=application,
    )


class FakeCollection:
    """Minimal stand-in for ``pymongo.collection.Collection``.

    Applies only the time range of the query; the coordinate size filter is
    left to the caller so malformed documents can still reach the parser.
    """

    full_name = "fleet.positions"

    def __init__(self, docs: Iterable[Mapping[str, Any]], time_field: str = "time"):
        self.docs = list(docs)
        self.time_field = time_field
        self.queries: List[Dict[str, Any]] = []

    def find(self, query: Dict[str, Any]):
        self.queries.append(query)
        window = query.get(self.time_field, {})
        for doc in self.docs:
            value = doc.get(self.time_field)
            if isinstance(value, datetime) and window:
                if value.tzinfo is None:
                    value = value.replace(tzinfo=timezone.utc)
                if not (window["$gte"] <= value <= window["$lte"]):
                    continue
            yield doc


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def may_24() -> datetime:
    return utc(2021, 5, 24, 10, 0, 0)


@pytest.fixture
def three_minutes_of_positions(may_24):
    """Three samples two minutes apart on 2021-05-24, no route label."""
    return [
        make_position("AAA", 9.10 + i * 0.001, 45.40, may_24 + timedelta(minutes=2 * i))
        for i in range(3)
    ]


@pytest.fixture
def whole_day():
    return utc(2021, 5, 24), utc(2021, 5, 24, 23, 59, 59)
