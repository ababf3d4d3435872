"""Partition device positions into per-(device, route-or-day) groups."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from ..errors import GroupingKeyError
from ..models import DevicePosition
from ..utils import is_aware, utc_date_string

GroupKey = Tuple[str, str]
Groups = Dict[GroupKey, List[DevicePosition]]


def route_key(position: DevicePosition) -> str:
    """Return the route label, or the UTC date when no label is set.

    Raises:
        GroupingKeyError: If the date cannot be derived from the timestamp.
    """

    if position.route is not None:
        label = position.route.strip()
        if label:
            return label
    try:
        return utc_date_string(position.time)
    except (ValueError, OverflowError) as exc:
        raise GroupingKeyError(
            f"Cannot derive a date key for device '{position.device_id}': {exc}"
        ) from exc


def group_key(position: DevicePosition) -> GroupKey:
    """Return ``(device_id, route_key)`` for a timezone-aware position.

    Raises:
        GroupingKeyError: If the position time has no UTC offset, whether or
            not it carries a route label.
    """

    if not is_aware(position.time):
        raise GroupingKeyError(
            f"Position of device '{position.device_id}' has a naive timestamp: "
            f"{position.time!r}"
        )
    return (position.device_id, route_key(position))


def group_positions(positions: Iterable[DevicePosition]) -> Groups:
    """Group positions by ``(device_id, route_key)``.

    Grouping ignores time windows: samples far apart in time still share a
    group when device and route-or-day match. Members keep their batch
    order and the returned mapping iterates in ascending key order.
    """

    groups: Groups = {}
    for position in positions:
        groups.setdefault(group_key(position), []).append(position)
    return {key: groups[key] for key in sorted(groups)}
