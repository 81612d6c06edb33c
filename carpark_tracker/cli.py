"""Command line interface for the carpark tracker pipeline."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Optional

from . import config
from .ingest import SheetIngestor, load_csv_file, run_ingestion
from .models import Period, TiePolicy
from .refresh import DashboardSnapshot, RefreshController, RefreshScheduler
from .transform import build_dashboard_views

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Carpark tracker ingestion and aggregation pipeline")
    parser.add_argument("command", choices=["ingest", "summary", "watch"], help="Pipeline stage to execute")
    parser.add_argument(
        "--url",
        dest="url",
        default=os.environ.get(config.SHEET_URL_ENV_VAR, config.SHEET_CSV_URL),
        help="Published CSV export URL",
    )
    parser.add_argument("--input", dest="input_path", default=None, help="Read a local CSV export instead of fetching")
    parser.add_argument("--snapshot", dest="snapshot_path", default=None, help="Write normalized events as newline-delimited JSON")
    parser.add_argument("--month", dest="month", default=config.ALL, help="Month filter (YYYY-MM or 'all')")
    parser.add_argument("--location", dest="location", default=config.ALL, help="Location filter (exact value or 'all')")
    parser.add_argument(
        "--period",
        dest="period",
        choices=[period.value for period in Period],
        default=Period.ALL.value,
        help="Date scope for average arrival times",
    )
    parser.add_argument(
        "--trend-policy",
        dest="trend_policy",
        choices=[policy.value for policy in TiePolicy],
        default=TiePolicy.LAST_INPUT.value,
        help="Which row wins when a trend date has several rows for one location",
    )
    parser.add_argument("--timezone", dest="tz", default=config.REFERENCE_TIMEZONE, help="Reference timezone")
    parser.add_argument(
        "--interval",
        dest="interval_seconds",
        type=int,
        default=config.REFRESH_INTERVAL_SECONDS,
        help="Seconds between refreshes in watch mode",
    )
    parser.add_argument("--verbose", dest="verbose", action="store_true", help="Enable verbose logging")
    return parser.parse_args(argv)


def _log_snapshot(snapshot: DashboardSnapshot) -> None:
    status = snapshot.status
    if status.error:
        logger.warning("Showing %s stale events (last error: %s)", len(snapshot.events), status.error)
    else:
        logger.info("Holding %s events, next refresh in %s", len(snapshot.events), status.countdown_display)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "ingest":
        result = run_ingestion(
            url=args.url,
            input_path=args.input_path,
            snapshot_path=args.snapshot_path,
            tz=args.tz,
        )
        print(json.dumps(result.stats.as_dict()))
        return 0

    if args.command == "summary":
        result = run_ingestion(url=args.url, input_path=args.input_path, tz=args.tz)
        views = build_dashboard_views(
            result.events,
            month=args.month,
            location=args.location,
            period=args.period,
            tz=args.tz,
            policy=args.trend_policy,
        )
        print(json.dumps(views.as_dict(), ensure_ascii=False, indent=2))
        return 0

    if args.command == "watch":
        if args.input_path:
            input_path = args.input_path

            def fetch_rows():
                return load_csv_file(input_path)
        else:
            fetch_rows = SheetIngestor(url=args.url, tz=args.tz).fetch_rows
        controller = RefreshController(fetch_rows, interval_seconds=args.interval_seconds, tz=args.tz)
        scheduler = RefreshScheduler(controller, on_refresh=_log_snapshot)
        scheduler.start()
        try:
            scheduler.wait()
        except KeyboardInterrupt:
            logger.info("Stopping")
        finally:
            scheduler.stop(timeout=5)
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
