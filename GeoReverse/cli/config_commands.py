"""
Configuration-related commands for the GeoReverse CLI.

This module provides commands for interacting with the GeoReverse configuration
system, including viewing, initializing, and validating configurations.
"""

import json
import os
from pathlib import Path
from typing import Optional

import click
import yaml

from GeoReverse.config import get_config, validate_config
from GeoReverse.config.manager import CONFIG_FILENAME
from GeoReverse.utils.logging import get_logger

# Get logger for this module
logger = get_logger(__name__)

def config_show(format_type: str = 'yaml', section: Optional[str] = None) -> int:
    """
    Display the current active configuration.

    Args:
        format_type: Output format (yaml or json)
        section: Optional section to display (e.g., 'data', 'logging')

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    config = get_config()

    if section:
        config_data = config.get(section)
        if config_data is None:
            click.echo(f"Error: Section '{section}' not found in configuration")
            return 1
    else:
        config_data = config.get_all()

    if format_type.lower() == 'json':
        click.echo(json.dumps(config_data, indent=2))
    else:
        click.echo(yaml.safe_dump(config_data, default_flow_style=False))

    return 0

def config_init(output_path: Optional[str] = None) -> int:
    """
    Create a template configuration file with explanatory comments.

    Args:
        output_path: Path where to create the template file

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if not output_path:
        output_path = os.path.join(os.getcwd(), CONFIG_FILENAME)

    output_path = Path(output_path)

    if output_path.exists():
        click.confirm(f"File {output_path} already exists. Overwrite?", abort=True)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            f.write(CONFIG_TEMPLATE)
    except OSError as e:
        logger.error(f"Error creating configuration template: {e}")
        return 1

    click.echo(f"Configuration template created at: {output_path}")
    return 0

def config_validate(config_path: str) -> int:
    """
    Validate a configuration file.

    Args:
        config_path: Path to the configuration file to validate

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    path = Path(config_path)

    if not path.exists():
        click.echo(f"Error: Configuration file not found: {path}")
        return 1

    try:
        if path.suffix.lower() in ('.yaml', '.yml'):
            with open(path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        elif path.suffix.lower() == '.json':
            with open(path, 'r') as f:
                config_data = json.load(f)
        else:
            click.echo(f"Error: Unsupported file format: {path.suffix}")
            return 1
    except (yaml.YAMLError, ValueError) as e:
        click.echo(f"Error: Could not parse {path}: {e}")
        return 1

    errors = validate_config(config_data)

    if not errors:
        click.echo(f"Configuration file is valid: {path}")
        return 0

    click.echo("Configuration validation errors:")
    for section, section_errors in errors.items():
        for error in section_errors:
            click.echo(f"  - {section}: {error}")
    return 1

CONFIG_TEMPLATE = """# GeoReverse Configuration File
# Every setting is optional; omitted values fall back to the defaults.

# Data Configuration
data:
  # Directory holding the snapshot (null: GEOREVERSE_DATA_DIR, ~/.georeverse/data
  # or the package data directory)
  directory: null
  # Snapshot file name inside the data directory
  snapshot_file: geocode.gz
  # Country reference file, code,name per line (null for the packaged countries.csv)
  country_file: null
  # Only index cities with at least this population
  min_population: 0
  # GeoNames sources
  cities_url: http://download.geonames.org/export/dump/cities1000.zip
  cities_member: cities1000.txt
  state_codes_url: http://download.geonames.org/export/dump/admin1CodesASCII.txt
  county_codes_url: http://download.geonames.org/export/dump/admin2Codes.txt
  # Download timeout in seconds
  download_timeout: 60

# Logging Configuration
logging:
  # Logging level (debug, info, warning, error, critical)
  level: info
  # Log format (json, text)
  format: text
  # Log file path (null for console only)
  file: null

# API Server Configuration
api:
  host: 0.0.0.0
  port: 5000
  debug: false
"""
