#!/usr/bin/env python3
"""
apimock - local mock API server

This is a convenience wrapper for running from a source checkout.
The actual implementation is in src/apimock/cli.py; installed copies
provide the `apimock` command instead.

Usage:
    python apimock-server.py --dir mock --port 8080
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from apimock.cli import main

if __name__ == '__main__':
    main()
