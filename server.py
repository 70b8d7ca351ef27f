#!/usr/bin/env python3
"""
Entry point for the GeoReverse API server.
This allows running the server directly with `python server.py`.
"""
import argparse

from GeoReverse.api.server import start_server
from GeoReverse.config import get_config
from GeoReverse.utils.logging import get_logger, set_log_level

# Get a logger for this module
logger = get_logger(__name__)

def main():
    """Entry point for the server."""
    config = get_config()
    config.load_config()

    parser = argparse.ArgumentParser(description='Start the GeoReverse API server')
    parser.add_argument('--host', type=str, default=config.get("api.host"), help='The host to bind to')
    parser.add_argument('--port', type=int, default=config.get("api.port"), help='The port to bind to')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--log-level', choices=['debug', 'info', 'warning', 'error', 'critical'],
                        default=config.get("logging.level"), help='Set the logging level')

    args = parser.parse_args()

    if args.log_level:
        set_log_level(args.log_level)

    logger.info(f"Starting server on {args.host}:{args.port}")

    start_server(
        host=args.host,
        port=args.port,
        debug=args.debug or config.get("api.debug", False)
    )

if __name__ == "__main__":
    main()
