"""Central configuration for the location tracks tool.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Overrides are read from environment variables (optionally
via a local `.env`).
"""

from __future__ import annotations

import math
import os

from dotenv import load_dotenv


def _env_float(key: str, default: float | None) -> float | None:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Configuration file
# ---------------------------------------------------------------------------
# Explicit configuration file. Takes precedence over the discovered files.
CONFIG_FILE = os.getenv("LOCATION_TRACKS_CONFIG") or None

# File name looked up in the working directory and then in the home folder.
CONFIG_FILENAME = ".location-tracks.yaml"


# ---------------------------------------------------------------------------
# Track segmentation defaults
# ---------------------------------------------------------------------------
# Width (seconds) of the epoch-aligned windows that split a track into
# segments. Used when no configuration file sets `segments.max_duration`.
MAX_SEGMENT_DURATION = _env_int("LOCATION_TRACKS_MAX_DURATION", 300)

# Visvalingam-Whyatt area tolerance, in squared degrees. Unset disables
# simplification unless a configuration file enables it.
VW_TOLERANCE = _env_float("LOCATION_TRACKS_VW_TOLERANCE", None)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
# Creator attribute written into every GPX document.
GPX_CREATOR = os.getenv("GPX_CREATOR", "location_tracks")

# Overwrite an existing destination file. When False the CLI refuses to
# replace a file that is already there.
GPX_OVERWRITE = _env_bool("LOCATION_TRACKS_OVERWRITE", True)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOCATION_TRACKS_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
