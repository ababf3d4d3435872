"""Tabular file source (CSV or Excel) for device positions.

Every cell is read as text and parsed here, so numeric device identifiers
keep their written form. A row that cannot be turned into a position is
skipped and counted; the count is logged once per fetch and exposed on
``TableSource.last_summary``. Missing required headers or an unreadable file
fail the whole fetch.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from ..errors import SourceFetchError
from ..models import DevicePosition, FieldsConfiguration, RawPosition
from ..utils import parse_timestamp
from .base import coerce_device_id, coerce_optional_float, in_window, split_coordinates

LOGGER = logging.getLogger(__name__)

_EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


@dataclass(frozen=True, slots=True)
class TableSummary:
    """Row counts of the last fetch."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    rows_in_window: int
    fieldnames: Sequence[str]


@dataclass(frozen=True, slots=True)
class _ColumnMap:
    device: str
    coordinates: str
    time: str
    route: Optional[str]
    speed: Optional[str]
    elevation: Optional[str]
    application: Optional[str]


def _find_column(columns: Sequence[object], name: str) -> Optional[str]:
    wanted = name.strip().lower()
    for column in columns:
        if str(column).strip().lower() == wanted:
            return str(column)
    return None


def _require_column(columns: Sequence[object], name: str, label: str) -> str:
    column = _find_column(columns, name)
    if column is None:
        raise SourceFetchError(
            f"{label} header '{name}' not found. Present: {[str(c) for c in columns]}"
        )
    return column


def _map_columns(columns: Sequence[object], fields: FieldsConfiguration) -> _ColumnMap:
    return _ColumnMap(
        device=_require_column(columns, fields.device_id, "Device"),
        coordinates=_require_column(columns, fields.coordinates, "Coordinates"),
        time=_require_column(columns, fields.time, "Time"),
        route=_find_column(columns, fields.route),
        speed=_find_column(columns, fields.speed),
        elevation=_find_column(columns, fields.elevation),
        application=_find_column(columns, fields.application),
    )


def _cell(record: Mapping[str, object], column: Optional[str]) -> str:
    if column is None:
        return ""
    value = record.get(column)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def _is_blank_row(record: Mapping[str, object]) -> bool:
    return all(_cell(record, str(column)) == "" for column in record)


def parse_row(
    record: Mapping[str, object], columns: _ColumnMap, fields: FieldsConfiguration
) -> DevicePosition:
    """Turn one table row into a position.

    Raises:
        ValueError: If device, coordinates or time are missing or malformed.
    """

    device_id = coerce_device_id(_cell(record, columns.device))
    longitude, latitude = split_coordinates(
        _cell(record, columns.coordinates), fields.flip_coordinates
    )
    time = parse_timestamp(_cell(record, columns.time))
    route = _cell(record, columns.route) or None
    application = _cell(record, columns.application) or None
    return DevicePosition(
        device_id=device_id,
        position=RawPosition(
            longitude=longitude,
            latitude=latitude,
            time=time,
            speed=coerce_optional_float(_cell(record, columns.speed)),
            altitude=coerce_optional_float(_cell(record, columns.elevation)),
        ),
        route=route,
        application=application,
    )


class TableSource:
    """Read positions from a CSV or Excel file.

    Args:
        path_or_buffer: File path, or a text buffer holding CSV data.
        fields: Header names to look for; defaults to ``FieldsConfiguration()``.
        excel: Force Excel (True) or CSV (False) parsing. By default the
            file suffix decides.
        sheet_name: Excel sheet to read.
    """

    def __init__(
        self,
        path_or_buffer: str | Path | io.TextIOBase,
        fields: FieldsConfiguration | None = None,
        *,
        excel: bool | None = None,
        sheet_name: str | int = 0,
    ) -> None:
        self._source = path_or_buffer
        self.fields = fields or FieldsConfiguration()
        if excel is None:
            excel = isinstance(path_or_buffer, (str, Path)) and (
                Path(path_or_buffer).suffix.lower() in _EXCEL_SUFFIXES
            )
        self._excel = excel
        self._sheet_name = sheet_name
        self.last_summary: TableSummary | None = None

    @property
    def label(self) -> str:
        if isinstance(self._source, (str, Path)):
            return str(self._source)
        return "<buffer>"

    def _read_frame(self) -> pd.DataFrame:
        try:
            if self._excel:
                return pd.read_excel(self._source, sheet_name=self._sheet_name, dtype=str)
            return pd.read_csv(
                self._source,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
                skip_blank_lines=True,
            )
        except (OSError, ValueError) as exc:
            raise SourceFetchError(
                f"Failed to read position table {self.label}: {exc}"
            ) from exc

    def fetch(self, start: datetime, end: datetime) -> List[DevicePosition]:
        frame = self._read_frame()
        columns = _map_columns(list(frame.columns), self.fields)
        records: List[Dict[str, object]] = frame.to_dict("records")

        positions: List[DevicePosition] = []
        rows_total = 0
        rows_parsed = 0
        for row_offset, record in enumerate(records, start=2):
            if _is_blank_row(record):
                continue
            rows_total += 1
            try:
                position = parse_row(record, columns, self.fields)
            except ValueError as exc:
                LOGGER.debug("Skipping row %d of %s: %s", row_offset, self.label, exc)
                continue
            rows_parsed += 1
            if in_window(position.time, start, end):
                positions.append(position)

        self.last_summary = TableSummary(
            rows_total=rows_total,
            rows_parsed=rows_parsed,
            rows_skipped=rows_total - rows_parsed,
            rows_in_window=len(positions),
            fieldnames=[str(c) for c in frame.columns],
        )
        if self.last_summary.rows_skipped:
            LOGGER.warning(
                "Skipped %d malformed rows of %d in %s",
                self.last_summary.rows_skipped,
                rows_total,
                self.label,
            )
        return positions
