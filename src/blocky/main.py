#!/usr/bin/env python3
"""
Blocky - Main entry point
"""

import argparse
import logging
import os
import signal
import sys

from blocky.controller import BlockyController


def main() -> None:
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Blocky - status bar block host for Linux")
    parser.add_argument("config", help="Path to YAML configuration file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    args = parser.parse_args()

    # stdout carries the bar protocol, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    logger = logging.getLogger(__name__)

    config_path = os.path.expanduser(args.config)
    if not os.path.exists(config_path):
        logger.error(f"Configuration file not found: {config_path}")
        sys.exit(1)

    controller = BlockyController(config_path)

    def signal_handler(signum, frame):
        """Handle shutdown signals gracefully"""
        logger.info(f"Received signal {signum}, shutting down gracefully...")
        controller.scheduler.running = False
        # Raise KeyboardInterrupt to trigger the normal shutdown flow
        raise KeyboardInterrupt()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    try:
        ok = controller.run()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        ok = True
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
