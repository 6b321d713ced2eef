#!/usr/bin/env python3
"""
CLI for the catalog maintenance jobs.

Usage:
    uv run -m src.maintenance init-db                  # Create missing tables
    uv run -m src.maintenance check-db                 # Test the database connection
    uv run -m src.maintenance check-openai             # Test the OpenAI API key
    uv run -m src.maintenance seed-categories          # Upsert the taxonomy
    uv run -m src.maintenance transcript-status        # Transcription progress
    uv run -m src.maintenance tag-status               # Tagging progress
    uv run -m src.maintenance clean-short-transcripts  # Delete one-word clips (!)
    uv run -m src.maintenance reset-tags               # Delete every tag (!)
"""

import argparse
import sys

from src.config import Settings, load_settings
from src.db import CatalogStore, create_db_engine, create_session_factory, init_database
from src.errors import ConfigurationError
from src.logger import setup_logging
from src.llm import init_llm_openai
from src.maintenance.cleanup import clean_short_transcripts, reset_tags
from src.maintenance.connectivity import check_database, check_openai
from src.maintenance.status import tag_status, transcription_status
from src.maintenance.taxonomy import seed_categories


def run_init_db(settings: Settings, engine, store: CatalogStore) -> int:
    init_database(engine)
    print("✓ Database tables created")
    return 0


def run_check_db(settings: Settings, engine, store: CatalogStore) -> int:
    return 0 if check_database(engine) else 1


def run_check_openai(settings: Settings, engine, store: CatalogStore) -> int:
    settings.require("openai_api_key")
    print(f"✓ API Key found: {settings.openai_api_key[:10]}...")
    print("\nTesting OpenAI API connection...\n")
    check_openai(init_llm_openai(settings.openai_api_key))
    return 0


def run_seed_categories(settings: Settings, engine, store: CatalogStore) -> int:
    print("Seeding categories...\n")
    stats = seed_categories(store)
    print(f"\n✓ {stats['seeded']} categories seeded, {stats['errors']} errors")
    return 0 if stats["errors"] == 0 else 1


def run_transcript_status(settings: Settings, engine, store: CatalogStore) -> int:
    status = transcription_status(store)
    print("Transcription Status\n")
    print(f"Total Clips: {status.total}")
    print(f"✓ With Transcripts: {status.with_transcript}")
    print(f"✗ Without Transcripts: {status.without_transcript}")
    print(f"\nProgress: {status.progress:.1f}%")
    return 0


def run_tag_status(settings: Settings, engine, store: CatalogStore) -> int:
    status = tag_status(store)
    print("Tagging Status\n")
    print(f"Total Clips: {status.total}")
    print(f"✓ Tagged: {status.tagged}")
    print(f"✗ Untagged: {status.untagged}")
    print(f"\nProgress: {status.progress:.1f}%")
    if status.untagged > 0:
        print(f"\nEstimated batches remaining: {status.estimated_batches}")
    return 0


def run_clean_short_transcripts(settings: Settings, engine, store: CatalogStore) -> int:
    print("Cleaning short transcripts...\n")
    deleted = clean_short_transcripts(store)
    print(f"\nCleanup complete! Deleted {deleted} clips with short transcripts")
    return 0


def run_reset_tags(settings: Settings, engine, store: CatalogStore) -> int:
    deleted = reset_tags(store)
    print(f"✓ All tags deleted ({deleted} rows)\n")
    print("You can now run auto-tagging from scratch.")
    return 0


COMMANDS = {
    "init-db": (run_init_db, "Create the catalog tables"),
    "check-db": (run_check_db, "Test the database connection"),
    "check-openai": (run_check_openai, "Test the OpenAI API key by listing models"),
    "seed-categories": (run_seed_categories, "Upsert the reference taxonomy"),
    "transcript-status": (run_transcript_status, "Show transcription progress"),
    "tag-status": (run_tag_status, "Show tagging progress"),
    "clean-short-transcripts": (
        run_clean_short_transcripts,
        "Delete clips with a one-word transcript (5s grace period)",
    ),
    "reset-tags": (run_reset_tags, "Delete all tags (5s grace period)"),
}


def main():
    parser = argparse.ArgumentParser(description="Radio catalog maintenance jobs")
    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, (_, help_text) in COMMANDS.items():
        subparsers.add_parser(name, help=help_text)
    parser.add_argument(
        "--verbose", action="store_true", help="Detailed console output"
    )
    args = parser.parse_args()

    logger = setup_logging(logger_name="maintenance", verbose=args.verbose)
    setup_logging(logger_name="database")
    logger.info(f"Running {args.command}")

    try:
        settings = load_settings()
        settings.require("database_url")
        engine = create_db_engine(settings.database_url)
        store = CatalogStore(create_session_factory(engine))

        handler, _ = COMMANDS[args.command]
        exit_code = handler(settings, engine, store)
        logger.info(f"{args.command} finished with exit code {exit_code}")
        sys.exit(exit_code)

    except ConfigurationError as e:
        print(f"✗ {e}")
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled by user")
        sys.exit(130)
    except Exception as e:
        print(f"✗ {args.command} failed: {e}")
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
