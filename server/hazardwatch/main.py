"""HazardWatch: command-line entry point.

This is the only file that knows about concrete implementations.
It wires together the config, engine, storage, queue and sink.

Usage:
    hazardwatch clusters --reports data/reports.jsonl --geojson
    hazardwatch check --reports data/reports.jsonl --lat 19.07 --lng 72.87
    echo "19.07,72.87" | hazardwatch watch --reports data/reports.jsonl
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import IO

import structlog

from hazardwatch.config import AppConfig, ConfigError, load_config
from hazardwatch.core.clustering import clusters_to_geojson
from hazardwatch.core.engine import HotspotEngine
from hazardwatch.core.geo import InvalidCoordinateError
from hazardwatch.core.geofence import LogNotificationSink, new_notifications
from hazardwatch.core.models import ClusterResult, Location
from hazardwatch.core.monitor import HotspotMonitor
from hazardwatch.core.stats import EngineStats
from hazardwatch.queue.asyncio_queue import AsyncioLocationQueue
from hazardwatch.storage.file_storage import FileReportStorage

log = structlog.get_logger()


def _setup_logging(config: AppConfig) -> IO[str] | None:
    """Configure structlog based on the logging config.

    Returns the opened log file, if any, for the caller to close.
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.logging.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    # stdout carries command output; logs go to stderr or the configured file.
    opened = None
    if config.logging.file:
        opened = open(config.logging.file, "a", encoding="utf-8")
    log_file = opened or sys.stderr

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.logging.level.upper()),
        ),
        logger_factory=structlog.PrintLoggerFactory(file=log_file),
    )
    return opened


def _result_to_dict(result: ClusterResult) -> dict:
    return {
        "hotspots": [h.to_geojson_feature()["properties"] | {
            "center": {"lat": h.center_lat, "lng": h.center_lng},
        } for h in result.hotspots],
        "unclustered_reports": [r.to_record() for r in result.unclustered_reports],
    }


def _cmd_clusters(args: argparse.Namespace, engine: HotspotEngine, storage: FileReportStorage) -> int:
    result = engine.cluster(storage.read_reports())
    payload = clusters_to_geojson(result) if args.geojson else _result_to_dict(result)
    print(json.dumps(payload, indent=2))
    return 0


def _cmd_check(args: argparse.Namespace, engine: HotspotEngine, storage: FileReportStorage) -> int:
    location = Location(args.lat, args.lng)
    _, notifications = engine.evaluate(storage.read_reports(), location)
    if args.previous:
        notifications = new_notifications(args.previous.split(","), notifications)
    print(json.dumps([n.to_dict() for n in notifications], indent=2))
    return 0


def _parse_location(line: str) -> Location:
    lat, lng = line.split(",")
    return Location(float(lat), float(lng))


async def _watch(config: AppConfig, engine: HotspotEngine, storage: FileReportStorage,
                 stats: EngineStats) -> None:
    """Feed "lat,lng" lines from stdin to a HotspotMonitor until EOF."""
    queue = AsyncioLocationQueue(max_size=config.monitor.location_queue_size)
    monitor = HotspotMonitor(
        engine=engine,
        source=storage,
        queue=queue,
        sink=LogNotificationSink(),
        stats=stats,
        poll_interval_seconds=config.monitor.poll_interval_seconds,
    )
    monitor.refresh(force=True)
    consumer_task = asyncio.create_task(monitor.run())
    polling_task = asyncio.create_task(monitor.run_polling())

    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        try:
            await queue.put(_parse_location(line))
        except ValueError:
            log.warning("location_unparseable", line=line)

    # Let the consumer drain pending updates before stopping.
    while queue.qsize():
        await asyncio.sleep(0.01)
    await asyncio.sleep(0)
    for task in (consumer_task, polling_task):
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    log.info("monitor_stopped", **stats.snapshot())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hazardwatch",
                                     description="Hazard report hotspot clustering and geofencing")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--reports", type=Path, default=None,
                        help="Reports JSON Lines file (default: storage.reports_file)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_clusters = sub.add_parser("clusters", help="Print hotspots and unclustered reports")
    p_clusters.add_argument("--geojson", action="store_true", help="Emit a GeoJSON FeatureCollection")

    p_check = sub.add_parser("check", help="Print notifications for a location")
    p_check.add_argument("--lat", type=float, required=True)
    p_check.add_argument("--lng", type=float, required=True)
    p_check.add_argument("--previous", default="",
                         help="Comma-separated notification ids already shown")

    sub.add_parser("watch", help="Read lat,lng lines from stdin and alert on geofence entry")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return 2
    log_file = _setup_logging(config)
    try:
        return _run(args, config)
    finally:
        if log_file is not None:
            structlog.reset_defaults()
            log_file.close()


def _run(args: argparse.Namespace, config: AppConfig) -> int:
    stats = EngineStats()
    engine = HotspotEngine(config.hotspots, stats)
    storage = FileReportStorage(args.reports or config.storage.reports_file)

    log.debug("hazardwatch_starting", command=args.command,
              reports_file=str(storage.path),
              min_reports=config.hotspots.min_reports,
              cluster_radius_m=config.hotspots.cluster_radius_m)

    try:
        if args.command == "clusters":
            return _cmd_clusters(args, engine, storage)
        if args.command == "check":
            return _cmd_check(args, engine, storage)
        asyncio.run(_watch(config, engine, storage, stats))
        return 0
    except InvalidCoordinateError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
