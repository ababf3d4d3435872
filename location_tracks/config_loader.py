"""YAML configuration for field names and segmentation options.

A configuration file holds two optional mappings::

    fields:
      device_id: dev_id
      flip_coordinates: true
    segments:
      max_duration: 600
      vw_tolerance: 0.00001

Missing or null sections and keys keep their defaults. Unknown keys are
ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields as dataclass_fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from . import config
from .errors import ConfigFileError
from .models import FieldsConfiguration, TrackSegmentOptions

LOGGER = logging.getLogger(__name__)


def _default_segments() -> TrackSegmentOptions:
    return TrackSegmentOptions(
        max_duration=config.MAX_SEGMENT_DURATION,
        vw_tolerance=config.VW_TOLERANCE,
    )


@dataclass(frozen=True, slots=True)
class Configs:
    fields: FieldsConfiguration = field(default_factory=FieldsConfiguration)
    segments: TrackSegmentOptions = field(default_factory=_default_segments)


def candidate_config_paths(provided: str | Path | None = None) -> List[Path]:
    """Return the configuration files to try, most specific first."""

    candidates: List[Path] = []
    if provided:
        candidates.append(Path(provided))
    candidates.append(Path(config.CONFIG_FILENAME))
    try:
        candidates.append(Path.home() / config.CONFIG_FILENAME)
    except RuntimeError:
        LOGGER.debug("Home directory unknown; skipping user configuration")
    return candidates


def _section(document: Mapping[str, Any], name: str) -> Dict[str, Any]:
    value = document.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigFileError(f"Section '{name}' must be a mapping")
    return dict(value)


def _parse_fields(section: Mapping[str, Any]) -> FieldsConfiguration:
    values: Dict[str, Any] = {}
    for item in dataclass_fields(FieldsConfiguration):
        value = section.get(item.name)
        if value is None:
            continue
        if item.name == "flip_coordinates":
            if not isinstance(value, bool):
                raise ConfigFileError("fields.flip_coordinates must be a boolean")
        elif not isinstance(value, str) or not value.strip():
            raise ConfigFileError(f"fields.{item.name} must be a non-empty string")
        values[item.name] = value
    return FieldsConfiguration(**values)


def _parse_segments(section: Mapping[str, Any]) -> TrackSegmentOptions:
    defaults = _default_segments()
    max_duration = section.get("max_duration")
    if max_duration is None:
        max_duration = defaults.max_duration
    elif isinstance(max_duration, bool) or not isinstance(max_duration, int):
        raise ConfigFileError("segments.max_duration must be an integer")

    # An explicit null disables simplification even if the environment sets it.
    if "vw_tolerance" in section:
        tolerance = section["vw_tolerance"]
    else:
        tolerance = defaults.vw_tolerance
    if tolerance is not None and (
        isinstance(tolerance, bool) or not isinstance(tolerance, (int, float))
    ):
        raise ConfigFileError("segments.vw_tolerance must be a number")

    try:
        return TrackSegmentOptions(max_duration=max_duration, vw_tolerance=tolerance)
    except ValueError as exc:
        raise ConfigFileError(f"Invalid segments configuration: {exc}") from exc


def parse_configs(text: str) -> Configs:
    """Parse YAML text into ``Configs``.

    Raises:
        ConfigFileError: If the YAML is malformed or a value has the wrong type.
    """

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"Invalid YAML configuration: {exc}") from exc
    if document is None:
        return Configs()
    if not isinstance(document, Mapping):
        raise ConfigFileError("Configuration root must be a mapping")
    return Configs(
        fields=_parse_fields(_section(document, "fields")),
        segments=_parse_segments(_section(document, "segments")),
    )


def load_configs(provided: str | Path | None = None, strict: bool = False) -> Configs:
    """Load the first readable configuration file.

    ``provided`` defaults to ``LOCATION_TRACKS_CONFIG``. Without any readable
    file the defaults are returned. A file that cannot be parsed raises
    ``ConfigFileError`` when ``strict``; otherwise it is logged and the
    defaults are used. In strict mode an unreadable ``provided`` file is an
    error too.
    """

    provided = provided or config.CONFIG_FILE
    text: Optional[str] = None
    chosen: Optional[Path] = None
    for index, path in enumerate(candidate_config_paths(provided)):
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            if strict and provided and index == 0:
                raise ConfigFileError(f"Cannot read configuration {path}: {exc}") from exc
            continue
        chosen = path
        break

    if text is None:
        LOGGER.debug("No configuration file found; using defaults")
        return Configs()

    try:
        configs = parse_configs(text)
    except ConfigFileError as exc:
        if strict:
            raise ConfigFileError(f"{chosen}: {exc}") from exc
        LOGGER.warning("Ignoring configuration %s: %s", chosen, exc)
        return Configs()
    LOGGER.info("Loaded configuration from %s", chosen)
    return configs
