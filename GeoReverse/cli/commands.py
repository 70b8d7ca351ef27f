"""
Command-line interface (CLI) commands for the GeoReverse package.

This module provides CLI commands for reverse geocoding coordinates, building
the record snapshot and serving the API from the command line.
"""

import os
import sys
from typing import Optional

import click

from GeoReverse.api.server import start_server
from GeoReverse.cli.config_commands import config_init, config_show, config_validate
from GeoReverse.config import get_config
from GeoReverse.data.importer import get_data_directory
from GeoReverse.exceptions import GeoReverseError
from GeoReverse.services.geocode_service import GeocodeService
from GeoReverse.utils import format_json
from GeoReverse.utils.logging import configure_logging, get_logger, set_log_level

# Get a logger for this module
logger = get_logger(__name__)

# Apply the log level if specified in the command options
def apply_log_level(ctx, param, value):
    if value:
        set_log_level(value)
    return value

# Add an option for setting the log level to all commands
def log_level_option(f):
    return click.option('--log-level',
                        type=click.Choice(['debug', 'info', 'warning', 'error', 'critical'], case_sensitive=False),
                        callback=apply_log_level, expose_value=False, is_eager=True,
                        help='Set the logging level')(f)

def snapshot_option(f):
    return click.option('--snapshot', 'snapshot_path', type=click.Path(dir_okay=False),
                        help='Snapshot file (default: geocode.gz in the data directory)')(f)

def fail(message: str, error: Optional[Exception] = None) -> None:
    """Report a command failure and exit with status 1."""
    if isinstance(error, GeoReverseError):
        logger.error(f"{message}: {error.error_code} - {error.message}")
        click.echo(f"Error: {error.user_message}", err=True)
    else:
        logger.error(f"{message}: {error}")
        click.echo(f"Error: {message}", err=True)
    sys.exit(1)

@click.group()
def cli():
    """GeoReverse CLI for reverse geocoding coordinates to cities."""
    pass

# Configuration commands group
@cli.group('config')
def config_group():
    """
    Manage GeoReverse configuration.

    Commands for working with the configuration system, including viewing,
    creating, and validating configuration files.
    """
    pass

@config_group.command('show')
@click.option('--format', 'format_type', type=click.Choice(['yaml', 'json'], case_sensitive=False),
              default='yaml', help='Output format (yaml or json)')
@click.option('--section', help='Show only a specific configuration section')
@log_level_option
def show_config_command(format_type, section):
    """Display the current active configuration."""
    sys.exit(config_show(format_type, section))

@config_group.command('init')
@click.option('--output', 'output_path', help='Path where to create the configuration file')
@log_level_option
def init_config_command(output_path):
    """Create a template configuration file with explanatory comments."""
    sys.exit(config_init(output_path))

@config_group.command('validate')
@click.argument('config_path')
@log_level_option
def validate_config_command(config_path):
    """Validate a configuration file."""
    sys.exit(config_validate(config_path))

@cli.command('query')
@click.argument('lat', type=click.FloatRange(-90, 90))
@click.argument('lng', type=click.FloatRange(-180, 180))
@click.option('--min-population', type=click.IntRange(min=0), default=None,
              help='Only match cities with at least this population (default: data.min_population)')
@snapshot_option
@click.option('--countries', 'country_path', type=click.Path(exists=True, dir_okay=False),
              help='Country reference file (code,name per line)')
@log_level_option
def query_command(lat, lng, min_population, snapshot_path, country_path):
    """Find the city nearest to LAT LNG."""
    if min_population is None:
        min_population = get_config().get_min_population()
    try:
        with GeocodeService(min_population=min_population,
                            snapshot_path=snapshot_path,
                            country_path=country_path) as service:
            results = service.query(lat, lng)
    except GeoReverseError as e:
        fail("Error during reverse geocoding", e)

    click.echo(format_json([record.to_dict() for record in results]))

@cli.command('build')
@snapshot_option
@click.option('--force', is_flag=True, help='Rebuild even if a snapshot already exists')
@log_level_option
def build_command(snapshot_path, force):
    """Download the GeoNames data and write the record snapshot."""
    if snapshot_path is None:
        config = get_config()
        snapshot_path = os.path.join(get_data_directory(config), config.get("data.snapshot_file"))

    try:
        with GeocodeService(snapshot_path=snapshot_path, force_ingest=force) as service:
            info = service.get_info()
    except GeoReverseError as e:
        fail("Error building snapshot", e)

    if info['snapshot_used']:
        click.echo(f"Snapshot already up to date: {snapshot_path} ({info['record_count']} cities)")
    else:
        click.echo(f"Built {info['record_count']} cities into {snapshot_path}")

@cli.command('info')
@click.option('--min-population', type=click.IntRange(min=0), default=None,
              help='Population threshold to report on (default: data.min_population)')
@snapshot_option
@log_level_option
def info_command(min_population, snapshot_path):
    """Show information about the loaded dataset."""
    if min_population is None:
        min_population = get_config().get_min_population()
    try:
        with GeocodeService(min_population=min_population, snapshot_path=snapshot_path) as service:
            info = service.get_info()
    except GeoReverseError as e:
        fail("Error loading dataset", e)

    click.echo(format_json(info))

@cli.command('server')
@click.option('--host', type=str, default=None, help='The host to bind to (default: api.host)')
@click.option('--port', type=int, default=None, help='The port to bind to (default: api.port)')
@click.option('--debug/--no-debug', default=None, help='Enable debug mode')
@log_level_option
def server_command(host, port, debug):
    """Start the GeoReverse API server."""
    config = get_config()
    host = host or config.get("api.host", "0.0.0.0")
    port = port or config.get("api.port", 5000)
    debug = config.get("api.debug", False) if debug is None else debug

    logger.info(f"Starting GeoReverse API server at {host}:{port}")
    try:
        start_server(host=host, port=port, debug=debug)
    except RuntimeError as e:
        fail("Error starting server", e)

def main():
    """Main entry point for the GeoReverse command-line interface."""
    config = get_config()

    # Without a config file the GEOREVERSE_LOG_* environment settings stay in effect.
    # Command line --log-level overrides both.
    if config.load_config():
        configure_logging(
            level=config.get("logging.level", "info"),
            use_json=config.get("logging.format") == "json",
            log_file=config.get("logging.file")
        )

    logger.debug("Configuration loaded successfully")
    return cli()

if __name__ == '__main__':
    main()
