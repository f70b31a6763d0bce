"""
apimock CLI

Command-line entry point for the apimock server.

Examples:
    # Serve ./mock on port 8080 (or whatever .apimockrc says)
    apimock

    # Serve another directory on another port
    apimock --dir fixtures/api --port 3001
"""

import argparse
import logging
import sys
from typing import List, Optional

from .common import ConfigLoader, ConfigError, CONFIG_FILE_NAME
from .common.config import LOG_LEVELS
from .mock import MockServer, MockConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='apimock',
        description="apimock - serve mock API responses from JSON files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Settings are read from ~/{CONFIG_FILE_NAME}, then ./{CONFIG_FILE_NAME},
then these flags; each later source overrides only what it sets.

Examples:
  # Serve ./mock on the default port
  %(prog)s

  # Serve a different directory and port
  %(prog)s --dir fixtures/api --port 3001
        """
    )
    parser.add_argument('-d', '--dir', help='Mock directory (default: config file or "mock")')
    parser.add_argument('-p', '--port', type=int, help='Port to bind (default: config file or 8080)')
    parser.add_argument('--host', help='Host to bind (default: config file or 127.0.0.1)')
    parser.add_argument('--log-level', choices=LOG_LEVELS,
                        help='Log level (default: config file or info)')
    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = ConfigLoader().resolve({
            'mock_dir': args.dir,
            'port': args.port,
            'host': args.host,
            'log_level': args.log_level
        })
    except ConfigError as e:
        print(f"❌ {e}")
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, settings['log_level'].upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    server = MockServer(config=MockConfig(**settings))

    # Start server (blocking)
    try:
        server.start()
    except KeyboardInterrupt:
        print("\n\n👋 Mock server stopped")


if __name__ == '__main__':
    main()
