"""
Entry point for running prefdiff as a module.

Usage:
    python -m prefdiff --script > settings.sh
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
