"""
API module for the GeoReverse package.

This module provides a Flask-based API server for reverse geocoding
coordinates through RESTful API endpoints.

Key Components:
- create_app: Create a Flask application instance
- start_server: Start the API server
"""

from GeoReverse.api.server import create_app, start_server

__all__ = ['create_app', 'start_server']
