"""Entry point for running upgrade-harness as a module.

Allows the package to be run as:
    python -m upgrade_harness
"""

import sys

from upgrade_harness.cli import main

if __name__ == "__main__":
    sys.exit(main())
