"""Position source protocol and value coercions shared by the adapters."""

from __future__ import annotations

import math
from datetime import datetime
from typing import List, Protocol, Tuple, runtime_checkable

from ..models import DevicePosition


@runtime_checkable
class PositionsSource(Protocol):
    """Anything able to return the device positions of a time window."""

    def fetch(self, start: datetime, end: datetime) -> List[DevicePosition]:
        """Return every sample with ``start <= time <= end``.

        Raises:
            SourceFetchError: If the positions cannot be produced.
        """
        ...


def in_window(time: datetime, start: datetime, end: datetime) -> bool:
    return start <= time <= end


def coerce_device_id(value: object) -> str:
    """Return a stable string device identifier.

    Integers and integral floats map to their decimal form (``251.0`` gives
    ``"251"``) so numeric identifiers group the same way as textual ones.

    Raises:
        ValueError: For blank, boolean or unsupported values.
    """

    if isinstance(value, bool):
        raise ValueError("Device field type not supported")
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            raise ValueError("Device field is blank")
        return candidate
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Device field is not finite: {value}")
        if value.is_integer():
            return str(int(value))
        return str(value)
    raise ValueError(f"Device field type not supported: {type(value).__name__}")


def coerce_optional_float(value: object) -> float | None:
    """Return ``value`` as float, or None when it is absent or not numeric."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


def order_coordinates(first: float, second: float, flip: bool) -> Tuple[float, float]:
    """Map a stored coordinate pair to ``(longitude, latitude)``.

    Pairs are stored longitude first unless ``flip`` says latitude first.
    """

    if flip:
        return second, first
    return first, second


def split_coordinates(text: str, flip: bool = False) -> Tuple[float, float]:
    """Parse a two-number coordinate cell into ``(longitude, latitude)``.

    The separator is a comma when present, else a semicolon, else
    whitespace.

    Raises:
        ValueError: If the cell does not hold exactly two numbers.
    """

    if "," in text:
        parts = text.split(",")
    elif ";" in text:
        parts = text.split(";")
    else:
        parts = text.split()
    parts = [part.strip() for part in parts]
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Expected a coordinate pair, got {text!r}")
    try:
        first, second = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ValueError(f"Invalid coordinate number in {text!r}") from exc
    if not (math.isfinite(first) and math.isfinite(second)):
        raise ValueError(f"Coordinates must be finite: {text!r}")
    return order_coordinates(first, second, flip)
