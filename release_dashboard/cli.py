"""Command-line entry points: run an ingestion batch, or serve the dashboard API.

Usage:
    release-ingest                          # ingest the repos listed in config.json
    release-ingest owner/repo1 owner/repo2  # ingest these repos instead
    release-ingest --all-days               # keep weekend releases in the period table
    release-dashboard                       # run the Flask server
"""

import argparse
import dataclasses
import sys
from pathlib import Path

from release_dashboard import create_app
from release_dashboard.config import IngestSettings, load_config
from release_dashboard.database import ReleaseTable
from release_dashboard.errors import InvalidTimestamp
from release_dashboard.extensions import logger
from release_dashboard.services.stats_service import ingest_releases


def build_parser():
    parser = argparse.ArgumentParser(description="Fetch GitHub releases and write the release tables.")
    parser.add_argument("repos", nargs="*", help="Repositories as owner/repo (default: config repos)")
    parser.add_argument("--config", type=Path, help="Path to config.json")
    parser.add_argument("--raw-out", type=Path, help="Release table output path")
    parser.add_argument("--stats-out", type=Path, help="Period stats table output path")
    parser.add_argument("--all-days", action="store_true", help="Count weekend releases in period stats")
    return parser


def ingest_main(argv=None):
    """Run one ingestion batch. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    settings = IngestSettings.from_config(config)

    overrides = {}
    if args.repos:
        invalid = [r for r in args.repos if r.count("/") != 1]
        if invalid:
            logger.error(f"Repositories must be owner/repo: {', '.join(invalid)}")
            return 2
        overrides["repos"] = tuple(args.repos)
    if args.raw_out:
        overrides["raw_table_path"] = args.raw_out
    if args.stats_out:
        overrides["stats_table_path"] = args.stats_out
    if args.all_days:
        overrides["workday_only"] = False
    settings = dataclasses.replace(settings, **overrides)

    if not settings.repos:
        logger.error("No repositories to ingest")
        return 2
    if not settings.token:
        logger.info("No GitHub token configured; unauthenticated rate limits apply")

    table = ReleaseTable(settings.raw_table_path, settings.stats_table_path)
    try:
        records = ingest_releases(settings, table)
    except InvalidTimestamp as e:
        logger.error(f"Ingestion aborted, nothing written: {e}")
        return 1

    logger.info(f"Ingestion finished: {len(records)} releases from {len(settings.repos)} repositories")
    return 0


def serve_main(argv=None):
    """Run the Flask development server on the configured host and port."""
    parser = argparse.ArgumentParser(description="Serve the release dashboard API.")
    parser.add_argument("--config", type=Path, help="Path to config.json")
    args = parser.parse_args(argv)

    config = load_config(args.config)

    app = create_app(config)
    app.run(
        host=config.get("host", "127.0.0.1"),
        port=config.get("port", 5050),
        debug=config.get("debug", False),
    )
    return 0


if __name__ == "__main__":
    sys.exit(ingest_main())
