#!/usr/bin/env python3
"""
Main entry point for the GeoReverse package when run as a module.

This module provides the entry point for running the GeoReverse package as a module
using `python -m GeoReverse`. It delegates to the CLI's main function.

Example:
    $ python -m GeoReverse query 48.8566 2.3522
    $ python -m GeoReverse build --force
    $ python -m GeoReverse server --host localhost --port 8080
"""

import sys

from GeoReverse.exceptions import GeoReverseError
from GeoReverse.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)

def main():
    """Main entry point for the GeoReverse package."""
    from GeoReverse.cli.commands import main as cli_main
    try:
        cli_main()
    except GeoReverseError as e:
        logger.error(f"{e.error_code} - {e.message}")
        print(f"Error: {e.user_message}", file=sys.stderr)
        print("Technical details have been logged.", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
