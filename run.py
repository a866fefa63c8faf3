"""
Run script for starting the Reception Relay server.

This script configures and starts the FastAPI server that routes visitor calls
to reception staff and relays WebRTC signaling between them.

Usage:
    python run.py [--port PORT] [--host HOST] [--log-level LEVEL]
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

sys.path.append(str(Path(__file__).parent))

from receptionist.config import settings
from receptionist.config.logging_config import configure_logging


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Start the Reception Relay server"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port to run the server on (default: 8000 or PORT env var)",
    )
    parser.add_argument(
        "--host",
        default=settings.HOST,
        help="Host to bind the server to (default: 0.0.0.0 or HOST env var)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args(argv)


def main():
    """Main entry point for starting the server."""
    args = parse_args()
    os.environ["LOG_LEVEL"] = args.log_level
    settings.LOG_LEVEL = args.log_level
    logger = configure_logging(args.log_level)

    logger.info(f"Starting server on http://{args.host}:{args.port}")
    logger.info(f"Log level: {args.log_level}")
    logger.info(f"Staff access key configured: {bool(settings.STAFF_ACCESS_KEY)}")
    if settings.CALL_ARCHIVE_PATH:
        logger.info(f"Archiving finished calls to {settings.CALL_ARCHIVE_PATH}")

    uvicorn.run(
        "receptionist.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        http="h11",
        # Disable access logs, we have our own logging
        access_log=False,
        # Reload on code changes during development
        reload=settings.ENV == "development",
    )


if __name__ == "__main__":
    main()
