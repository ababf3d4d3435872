"""MongoDB collection source for device positions.

The query only returns documents inside the window whose coordinate field is
a two-element array. Any returned document that still cannot be parsed fails
the whole fetch; nothing is skipped silently.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from bson.timestamp import Timestamp
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..errors import SourceFetchError
from ..models import DevicePosition, FieldsConfiguration, RawPosition
from ..utils import parse_timestamp
from .base import coerce_device_id, coerce_optional_float, order_coordinates

LOGGER = logging.getLogger(__name__)

Document = Mapping[str, Any]


def _parse_number(value: object, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid type of {label}")
    return float(value)


def _parse_time(value: object) -> datetime:
    if isinstance(value, datetime):
        # BSON dates are UTC; pymongo hands them back naive unless tz_aware.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, Timestamp):
        return value.as_datetime()
    if isinstance(value, str):
        return parse_timestamp(value)
    if value is None:
        raise ValueError("Time field not found")
    raise ValueError(f"Time field type not supported: {type(value).__name__}")


def _parse_label(value: object) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    return None


def _parse_route(value: object) -> Optional[str]:
    if isinstance(value, list):
        return _parse_label(value[0]) if value else None
    return _parse_label(value)


def parse_document(doc: Document, fields: FieldsConfiguration) -> DevicePosition:
    """Turn one MongoDB document into a position.

    Raises:
        ValueError: If a required field is missing or has an unsupported type.
    """

    if fields.device_id not in doc:
        raise ValueError("Device field not found")
    device_id = coerce_device_id(doc[fields.device_id])

    coordinates = doc.get(fields.coordinates)
    if not isinstance(coordinates, (list, tuple)):
        raise ValueError(f"Field '{fields.coordinates}' is not an array")
    if len(coordinates) != 2:
        raise ValueError("Coordinates size invalid")
    longitude, latitude = order_coordinates(
        _parse_number(coordinates[0], "coordinate"),
        _parse_number(coordinates[1], "coordinate"),
        fields.flip_coordinates,
    )

    time = _parse_time(doc.get(fields.time))

    return DevicePosition(
        device_id=device_id,
        position=RawPosition(
            longitude=longitude,
            latitude=latitude,
            time=time,
            speed=coerce_optional_float(doc.get(fields.speed)),
            altitude=coerce_optional_float(doc.get(fields.elevation)),
        ),
        route=_parse_route(doc.get(fields.route)),
        application=_parse_label(doc.get(fields.application)),
    )


class MongoSource:
    """Read positions from a MongoDB collection."""

    def __init__(
        self, collection: Collection, fields: FieldsConfiguration | None = None
    ) -> None:
        self.collection = collection
        self.fields = fields or FieldsConfiguration()

    def build_filter(self, start: datetime, end: datetime) -> dict[str, Any]:
        return {
            self.fields.time: {"$gte": start, "$lte": end},
            self.fields.coordinates: {"$size": 2},
        }

    def fetch(self, start: datetime, end: datetime) -> List[DevicePosition]:
        query = self.build_filter(start, end)
        LOGGER.debug("find %s", query)
        positions: List[DevicePosition] = []
        try:
            for doc in self.collection.find(query):
                try:
                    positions.append(parse_document(doc, self.fields))
                except ValueError as exc:
                    raise SourceFetchError(
                        f"Cannot parse document {doc.get('_id')}: {exc}"
                    ) from exc
        except PyMongoError as exc:
            raise SourceFetchError(f"Failed to query {self._name}: {exc}") from exc
        LOGGER.info("Fetched %d documents from %s", len(positions), self._name)
        return positions

    @property
    def _name(self) -> str:
        return str(getattr(self.collection, "full_name", self.collection))
