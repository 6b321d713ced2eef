#!/usr/bin/env python3
"""
CLI for AI auto-tagging of transcribed clips.

Usage:
    uv run -m src.tagging                # Up to 1000 untagged clips
    uv run -m src.tagging --limit 100    # Up to 100 untagged clips
    uv run -m src.tagging --all          # Batches of 100 until everything is tagged
"""

import argparse
import sys

from src.config import load_settings
from src.db import create_store
from src.errors import ConfigurationError, EmptyTaxonomyError
from src.llm import init_llm_openai
from src.logger import setup_logging
from src.tagging.auto_tag import BATCH_SIZE, auto_tag_all, auto_tag_clips
from src.tagging.classifier import OpenAIClassifier


def main():
    """Entry point for the auto-tagging CLI (exit 0 ok, 1 failures, 130 interrupted)."""
    parser = argparse.ArgumentParser(
        description="Tag team radio clips with categories using an OpenAI model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run -m src.tagging                # Up to 1000 untagged clips
  uv run -m src.tagging --limit 100    # Up to 100 untagged clips
  uv run -m src.tagging --all          # Keep going in batches of 100
        """,
    )
    parser.add_argument("--limit", type=int, help="Max clips to process (default: 1000)")
    parser.add_argument(
        "--all",
        action="store_true",
        help=f"Run batches of {BATCH_SIZE} until no clip is left to tag",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Detailed console output"
    )
    args = parser.parse_args()

    if args.limit is not None and args.limit <= 0:
        parser.error("--limit must be a positive integer")

    logger = setup_logging(logger_name="auto_tag", verbose=args.verbose)
    setup_logging(logger_name="database")
    logger.info("Starting auto-tagging")

    try:
        settings = load_settings()
        settings.require("database_url", "openai_api_key")
        store = create_store(settings.database_url)
        classifier = OpenAIClassifier(
            init_llm_openai(settings.openai_api_key),
            model=settings.classification_model,
        )

        print("Starting AI auto-tagging...\n")
        if args.all:
            summary = auto_tag_all(store, classifier, batch_size=args.limit or BATCH_SIZE)
        else:
            summary = auto_tag_clips(store, classifier, limit=args.limit)

        print("=" * 60)
        print("Auto-tagging complete!")
        print("=" * 60)
        print(f"Total Clips: {summary.total}")
        print(f"✓ Successfully Tagged: {summary.tagged}")
        print(f"✗ Failed: {summary.failed}")
        print(f"⏭ Skipped: {summary.skipped}")
        print("=" * 60)

        logger.info(f"Auto-tagging completed: {summary.to_dict()}")
        sys.exit(0 if summary.failed == 0 else 1)

    except (ConfigurationError, EmptyTaxonomyError) as e:
        print(f"✗ {e}")
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nAuto-tagging interrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"✗ Auto-tagging failed: {e}")
        logger.error(f"Auto-tagging failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
