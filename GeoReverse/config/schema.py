from typing import TypedDict, Literal, Optional, Dict, Any, List, Union
import re

# Define valid options as literals for type checking
LoggingLevel = Literal["debug", "info", "warning", "error", "critical"]
LoggingFormat = Literal["json", "text"]

class DataConfig(TypedDict):
    """TypedDict for data configuration validation"""
    directory: Optional[str]
    snapshot_file: str
    country_file: Optional[str]
    min_population: int
    cities_url: str
    cities_member: str
    state_codes_url: str
    county_codes_url: str
    download_timeout: Union[int, float]

class LoggingConfig(TypedDict):
    """TypedDict for logging configuration validation"""
    level: LoggingLevel
    format: LoggingFormat
    file: Optional[str]

class ApiConfig(TypedDict):
    """TypedDict for API configuration validation"""
    host: str
    port: int
    debug: bool

class ConfigSchema(TypedDict):
    """Root configuration schema that includes all config sections"""
    data: DataConfig
    logging: LoggingConfig
    api: ApiConfig

# Schema validation functions
def is_valid_logging_level(level: str) -> bool:
    """Validate the logging level against allowed values"""
    return level in ("debug", "info", "warning", "error", "critical")

def is_valid_logging_format(fmt: str) -> bool:
    """Validate the logging format against allowed values"""
    return fmt in ("json", "text")

def is_valid_url(url: str) -> bool:
    """
    Basic validation for URLs. Checks for common URL patterns.
    """
    url_pattern = re.compile(
        r'^https?://'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IPv4
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)
    return bool(url_pattern.match(url))

def is_valid_port(port: int) -> bool:
    """Validate that a port number is within the allowed range."""
    return isinstance(port, int) and not isinstance(port, bool) and 1 <= port <= 65535

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

def validate_data_config(data_config: Dict[str, Any]) -> List[str]:
    """
    Validate the data configuration section.

    Args:
        data_config: Data configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    for key in ("directory", "country_file"):
        if key in data_config and data_config[key] is not None:
            if not isinstance(data_config[key], str):
                errors.append(f"Data {key} must be a string or null, got {type(data_config[key]).__name__}")

    for key in ("snapshot_file", "cities_member"):
        if key in data_config:
            if not isinstance(data_config[key], str) or not data_config[key]:
                errors.append(f"Data {key} must be a non-empty string")

    for key in ("cities_url", "state_codes_url", "county_codes_url"):
        if key in data_config:
            if not isinstance(data_config[key], str):
                errors.append(f"Data {key} must be a string, got {type(data_config[key]).__name__}")
            elif not is_valid_url(data_config[key]):
                errors.append(f"Invalid {key}: {data_config[key]}")

    if "min_population" in data_config:
        if not _is_int(data_config["min_population"]):
            errors.append(f"Minimum population must be an integer, got {type(data_config['min_population']).__name__}")
        elif data_config["min_population"] < 0:
            errors.append(f"Minimum population must be non-negative, got {data_config['min_population']}")

    if "download_timeout" in data_config:
        timeout = data_config["download_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            errors.append("Download timeout must be a number")
        elif timeout <= 0:
            errors.append(f"Download timeout must be positive, got {timeout}")

    return errors

def validate_logging_config(logging_config: Dict[str, Any]) -> List[str]:
    """
    Validate the logging configuration section.

    Args:
        logging_config: Logging configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    if "level" in logging_config and not is_valid_logging_level(logging_config["level"]):
        errors.append(f"Invalid logging level: {logging_config['level']}. Must be one of: debug, info, warning, error, critical")

    if "format" in logging_config and not is_valid_logging_format(logging_config["format"]):
        errors.append(f"Invalid logging format: {logging_config['format']}. Must be one of: json, text")

    if "file" in logging_config and logging_config["file"] is not None:
        if not isinstance(logging_config["file"], str):
            errors.append("Logging file must be a string or null")

    return errors

def validate_api_config(api_config: Dict[str, Any]) -> List[str]:
    """
    Validate API configuration.

    Args:
        api_config: The API configuration dictionary

    Returns:
        List of error messages for invalid configurations
    """
    errors = []

    if "host" in api_config and not isinstance(api_config["host"], str):
        errors.append("API host must be a string")

    if "port" in api_config and not is_valid_port(api_config["port"]):
        errors.append("API port must be an integer between 1 and 65535")

    if "debug" in api_config and not isinstance(api_config["debug"], bool):
        errors.append("API debug setting must be a boolean")

    return errors

_SECTION_VALIDATORS = {
    "data": validate_data_config,
    "logging": validate_logging_config,
    "api": validate_api_config,
}

def validate_config(config: Any) -> Dict[str, List[str]]:
    """
    Validate a configuration structure.

    Sections may be omitted; missing values fall back to the defaults when
    the configuration is merged.

    Args:
        config: The configuration dictionary to validate

    Returns:
        Dictionary mapping sections to lists of error messages
    """
    if not isinstance(config, dict):
        return {"root": ["Configuration must be a mapping of sections"]}

    errors: Dict[str, List[str]] = {}

    for section, value in config.items():
        if section not in _SECTION_VALIDATORS:
            errors.setdefault("root", []).append(f"Unknown configuration section: {section}")
            continue
        if not isinstance(value, dict):
            errors[section] = [f"Section '{section}' must be a mapping"]
            continue
        section_errors = _SECTION_VALIDATORS[section](value)
        if section_errors:
            errors[section] = section_errors

    return errors
