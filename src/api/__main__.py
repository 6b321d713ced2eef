"""
Run the HTTP API.

Usage:
    uv run -m src.api --host 0.0.0.0 --port 8000
"""

import argparse

import uvicorn

from src.logger import setup_logging
from .app import app


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Team radio catalog HTTP API")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for HTTP server (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for HTTP server (default: 8000).",
    )
    args = parser.parse_args()

    for name in ("api", "sync_radio", "transcription", "openf1", "database"):
        setup_logging(logger_name=name)

    uvicorn.run(app, host=args.host, port=args.port)
