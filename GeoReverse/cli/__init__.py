"""
Command-line interface module for the GeoReverse package.

This module provides a command-line interface for reverse geocoding
coordinates, building the record snapshot and running the API server.

Key Components:
- main: Main entry point for the CLI
- cli: The click command group
"""

from GeoReverse.cli.commands import cli, main

__all__ = ['cli', 'main']
