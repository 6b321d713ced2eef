#!/usr/bin/env python3
"""
Main entry point for the ingestion package.

Syncs OpenF1 team radio messages into the catalog:
    uv run -m src.ingestion                     # Every session
    uv run -m src.ingestion --year 2024         # One season
    uv run -m src.ingestion --session-key 9158  # One session
    uv run -m src.ingestion --latest-days 7     # Sessions with recent radio
"""

import argparse
import sys
from datetime import datetime

from src.config import load_settings
from src.db import create_store
from src.errors import ConfigurationError, DataSourceError, NoSessionsFound
from src.ingestion.sync_radio import sync_radio_messages, sync_recent_radio
from src.logger import setup_logging
from src.openf1 import OpenF1Client


FIRST_OPENF1_SEASON = 2023


def main():
    """
    Entry point for the ingestion CLI that synchronizes OpenF1 radio messages into the catalog.

    Exits with code 0 on success (including "no sessions found"), 1 on error,
    or 130 when interrupted by the user.
    """
    parser = argparse.ArgumentParser(
        description="Sync F1 team radio messages from OpenF1 to the catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run -m src.ingestion                     # Sync every session
  uv run -m src.ingestion --year 2024         # Sync the 2024 season
  uv run -m src.ingestion --session-key 9158  # Sync a single session
  uv run -m src.ingestion --latest-days 7     # Sessions with radio in the last week
        """,
    )
    filters = parser.add_mutually_exclusive_group()
    filters.add_argument("--year", type=int, help="Season to sync (2023 onwards)")
    filters.add_argument("--session-key", type=int, help="OpenF1 session key")
    filters.add_argument(
        "--latest-days",
        type=int,
        help="Sync the sessions with radio messages in the last N days",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Detailed console output"
    )
    args = parser.parse_args()

    current_year = datetime.now().year
    if args.year is not None and not FIRST_OPENF1_SEASON <= args.year <= current_year:
        parser.error(
            f"Invalid year. OpenF1 API has data from {FIRST_OPENF1_SEASON} to {current_year}."
        )
    if args.latest_days is not None and args.latest_days <= 0:
        parser.error("--latest-days must be a positive integer")

    logger = setup_logging(logger_name="sync_radio", verbose=args.verbose)
    setup_logging(logger_name="openf1", verbose=args.verbose)
    setup_logging(logger_name="database")
    logger.info("Starting radio sync")

    try:
        settings = load_settings()
        settings.require("database_url")
        store = create_store(settings.database_url)
        client = OpenF1Client(settings.openf1_base_url, timeout=settings.openf1_timeout)

        target = f" for year {args.year}" if args.year else ""
        if args.session_key:
            target = f" for session {args.session_key}"
        if args.latest_days:
            target = f" for the last {args.latest_days} days"
        print(f"Starting F1 radio sync{target}...\n")

        if args.latest_days:
            summary = sync_recent_radio(client, store, days=args.latest_days)
        else:
            summary = sync_radio_messages(
                client, store, session_key=args.session_key, year=args.year
            )

        print("\n" + "=" * 60)
        print("Sync complete!")
        print("=" * 60)
        print(f"Sessions Processed: {summary.sessions_processed}")
        print(f"Total Radio Messages: {summary.total_radio_messages}")
        print(f"New Messages Added: {summary.new_radio_messages}")
        print(f"Skipped (duplicates/orphans): {summary.skipped_messages}")
        print("=" * 60)
        logger.info(f"Operation completed: {summary.to_dict()}")
        sys.exit(0)

    except NoSessionsFound:
        print("No sessions found. Exiting.")
        sys.exit(0)
    except (ConfigurationError, DataSourceError) as e:
        print(f"✗ {e}")
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nSync interrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"✗ Sync failed: {e}")
        logger.error(f"Sync failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
