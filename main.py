#!/usr/bin/env python3
"""Convenience entry point for running from a checkout:
    uv run main.py check ./ipfs-new v0.5.0

For installed usage, prefer:
    upgrade-harness check ./ipfs-new v0.5.0
    python -m upgrade_harness check ./ipfs-new v0.5.0
"""

import sys

from upgrade_harness.cli import main

if __name__ == "__main__":
    sys.exit(main())
