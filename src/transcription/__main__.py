#!/usr/bin/env python3
"""
CLI for transcribing team radio clips with OpenAI Whisper.

Usage:
    uv run -m src.transcription                  # 10 newest clips without transcript
    uv run -m src.transcription --limit 50       # 50 newest clips without transcript
    uv run -m src.transcription --clip-id <id>   # One clip, even if already transcribed
"""

import argparse
import sys

from src.config import load_settings
from src.db import create_store
from src.errors import ConfigurationError
from src.llm import init_llm_openai
from src.logger import setup_logging
from src.transcription.batch import DEFAULT_LIMIT, transcribe_clips
from src.transcription.transcript import WhisperTranscriber


def main():
    """
    Entry point for the transcription CLI.

    Exits with code 0 when every clip succeeded, 1 when any clip failed or on
    a configuration/database error, 130 when interrupted by the user.
    """
    parser = argparse.ArgumentParser(
        description="Transcribe team radio clips with OpenAI Whisper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run -m src.transcription                  # 10 newest untranscribed clips
  uv run -m src.transcription --limit 50       # 50 newest untranscribed clips
  uv run -m src.transcription --clip-id 0192f6c4-...  # Re-transcribe one clip
        """,
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Max clips to transcribe (default: {DEFAULT_LIMIT})",
    )
    parser.add_argument("--clip-id", type=str, help="Transcribe only this clip")
    parser.add_argument(
        "--verbose", action="store_true", help="Detailed console output"
    )
    args = parser.parse_args()

    if args.limit is not None and args.limit <= 0:
        parser.error("--limit must be a positive integer")

    logger = setup_logging(logger_name="transcription", verbose=args.verbose)
    setup_logging(logger_name="database")
    logger.info("Starting transcription run")

    try:
        settings = load_settings()
        settings.require("database_url", "openai_api_key")
        store = create_store(settings.database_url)
        transcriber = WhisperTranscriber(
            init_llm_openai(settings.openai_api_key),
            model=settings.transcription_model,
            temp_dir=settings.audio_temp_dir,
        )

        print("Starting team radio transcription...\n")
        summary = transcribe_clips(
            store, transcriber, clip_id=args.clip_id, limit=args.limit
        )

        print("\n" + "=" * 60)
        print("Transcription complete!")
        print("=" * 60)
        print(f"Total Clips: {summary.total}")
        print(f"✓ Successful: {summary.successful}")
        print(f"✗ Failed: {summary.failed}")
        print("=" * 60)

        if summary.failed > 0:
            print("Check logs/transcription.log for detailed error information")
        logger.info(f"Transcription completed: {summary.to_dict()}")
        sys.exit(0 if summary.failed == 0 else 1)

    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}")
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nTranscription interrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"✗ Transcription failed: {e}")
        logger.error(f"Transcription failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
