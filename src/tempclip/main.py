#!/usr/bin/env python3

import argparse
import dataclasses
import logging
import sys

import uvicorn

from tempclip.api import create_app
from tempclip.config import TempClipConfig

logger = logging.getLogger(__name__)


def parse_args(config: TempClipConfig, argv=None):
    parser = argparse.ArgumentParser(
        description="TempClip - share text through short-lived private links"
    )

    parser.add_argument(
        "--host",
        type=str,
        default=config.host,
        help=f"Interface to bind (default: {config.host})"
    )

    parser.add_argument(
        "-p", "--port",
        type=int,
        default=config.port,
        help=f"HTTP port (default: {config.port})"
    )

    parser.add_argument(
        "-c", "--cleanup-interval",
        type=float,
        default=config.cleanup_interval,
        help=f"Seconds between background cleanups (default: {config.cleanup_interval:.0f})"
    )

    parser.add_argument(
        "--lazy-cleanup",
        action=argparse.BooleanOptionalAction,
        default=config.lazy_cleanup,
        help="Sweep expired clips on access instead of on a timer"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    return parser.parse_args(argv)


def main():
    try:
        config = TempClipConfig.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    args = parse_args(config)

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')

    config = dataclasses.replace(
        config,
        host=args.host,
        port=args.port,
        cleanup_interval=args.cleanup_interval,
        lazy_cleanup=args.lazy_cleanup,
    )

    mode = "lazy" if config.lazy_cleanup else f"every {config.cleanup_interval:.0f}s"
    logger.info(f"Starting TempClip on {config.host}:{config.port} (cleanup: {mode})")

    try:
        uvicorn.run(
            create_app(config),
            host=config.host,
            port=config.port,
            log_level=logging.getLevelName(level).lower(),
        )
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
