#!/usr/bin/env python3
"""
Entry point for the GeoReverse CLI.
This allows running the CLI directly with `python cli.py`.
"""
from GeoReverse.cli.commands import main

if __name__ == '__main__':
    main()
