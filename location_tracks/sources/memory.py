"""In-memory position source."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List

from ..models import DevicePosition
from .base import in_window


class MemorySource:
    """Serve an already materialised batch of positions."""

    def __init__(self, positions: Iterable[DevicePosition] = ()) -> None:
        self._positions = list(positions)

    def fetch(self, start: datetime, end: datetime) -> List[DevicePosition]:
        return [p for p in self._positions if in_window(p.time, start, end)]
