"""Command-line entry point: read positions, build tracks, write GPX.

Usage:
    location-tracks csv positions.csv 2021-05-24T00:00:00Z 2021-05-25T00:00:00Z out.gpx
    location-tracks excel positions.xlsx START END out.gpx --config tracks.yaml
    location-tracks mongo mongodb://localhost/fleet positions START END out.gpx
"""

from __future__ import annotations

import argparse
import logging
from contextlib import closing
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Sequence

from pymongo import MongoClient
from pymongo.errors import ConfigurationError, PyMongoError

from . import config
from .config_loader import Configs, load_configs
from .errors import SourceFetchError, TrackBuildError
from .gpx_writer import write_gpx
from .models import Track
from .sources import MongoSource, PositionsSource, TableSource
from .tracks import TrackService
from .utils import parse_timestamp

LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _setup_logging(level: str) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=getattr(logging, level), format=config.LOG_FORMAT)
    else:
        logging.getLogger().setLevel(getattr(logging, level))


def _timestamp(text: str) -> datetime:
    try:
        return parse_timestamp(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        help="Fields and segments configuration "
        f"(default: {config.CONFIG_FILENAME}, ~/{config.CONFIG_FILENAME})",
    )
    common.add_argument(
        "--log-level",
        default=config.LOG_LEVEL if config.LOG_LEVEL in LOG_LEVELS else "INFO",
        choices=LOG_LEVELS,
        help="Python logging level",
    )

    parser = argparse.ArgumentParser(
        prog="location-tracks",
        description="Convert device positions into GPX tracks",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    csv_cmd = commands.add_parser("csv", parents=[common], help="Read a CSV file")
    csv_cmd.add_argument("path", help="CSV file with a header row")

    excel_cmd = commands.add_parser("excel", parents=[common], help="Read an Excel sheet")
    excel_cmd.add_argument("path", help="Excel workbook (first sheet is read)")

    mongo_cmd = commands.add_parser(
        "mongo", parents=[common], help="Read a MongoDB collection"
    )
    mongo_cmd.add_argument(
        "connection", help="MongoDB URI including the default database"
    )
    mongo_cmd.add_argument("collection", help="Collection holding the positions")

    for command in (csv_cmd, excel_cmd, mongo_cmd):
        command.add_argument("start", type=_timestamp, help="RFC 3339 window start")
        command.add_argument("end", type=_timestamp, help="RFC 3339 window end")
        command.add_argument("destination", help="GPX file to write")
    return parser


def _build(
    source: PositionsSource, args: argparse.Namespace, configs: Configs
) -> List[Track]:
    return TrackService(configs.segments).build(source, args.start, args.end)


def _run_table(args: argparse.Namespace, configs: Configs) -> List[Track]:
    source = TableSource(args.path, configs.fields, excel=args.command == "excel")
    return _build(source, args, configs)


def _run_mongo(args: argparse.Namespace, configs: Configs) -> List[Track]:
    try:
        client: MongoClient = MongoClient(args.connection, tz_aware=True)
    except PyMongoError as exc:
        raise SourceFetchError(f"Cannot connect to MongoDB: {exc}") from exc
    with closing(client):
        try:
            database = client.get_default_database()
        except ConfigurationError as exc:
            raise SourceFetchError("Default database not provided") from exc
        source = MongoSource(database[args.collection], configs.fields)
        return _build(source, args, configs)


_RUNNERS: dict[str, Callable[[argparse.Namespace, Configs], List[Track]]] = {
    "csv": _run_table,
    "excel": _run_table,
    "mongo": _run_mongo,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tool; return the process exit code."""

    args = _build_parser().parse_args(argv)
    _setup_logging(args.log_level)

    destination = Path(args.destination)
    try:
        if destination.exists() and not config.GPX_OVERWRITE:
            raise FileExistsError(f"Destination already exists: {destination}")
        configs = load_configs(args.config, strict=bool(args.config))
        tracks = _RUNNERS[args.command](args, configs)
        write_gpx(tracks, destination)
    except (TrackBuildError, ValueError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 1
    LOGGER.info("Exported %d tracks to %s", len(tracks), destination)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
