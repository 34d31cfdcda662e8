"""
Command-line launcher for Marina

Usage:
    python app/main.py BoatData.csv

Equivalent to the installed `marina` command.
"""

import sys

from marina.cli import main


if __name__ == "__main__":
    sys.exit(main())
