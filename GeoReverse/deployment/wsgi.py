#!/usr/bin/env python3
"""
WSGI entry point for the GeoReverse API.

The geocode service is built once per process when this module is imported.
"""
from GeoReverse.api.server import create_app
from GeoReverse.config import get_config

get_config().load_config()

# Create the Flask application
app = create_app(debug=get_config().get("api.debug", False))

if __name__ == "__main__":
    app.run()
