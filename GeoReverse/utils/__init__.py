"""
Utility functions for the GeoReverse package.

This module provides helpers shared by the CLI and API layers, mainly JSON
formatting of query results.
"""

import json
from typing import Any

from GeoReverse.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)

def format_json(data: Any, indent: int = 2, sort_keys: bool = False) -> str:
    """
    Format data as JSON string with proper encoding.

    Non-ASCII city names are emitted as-is rather than escaped.

    Args:
        data: The data to format as JSON
        indent: Number of spaces for indentation (default: 2)
        sort_keys: Whether to sort dictionary keys (default: False)

    Returns:
        A formatted JSON string

    Example:
        >>> print(format_json({'city': 'Zürich', 'latitude': 47.36667}))
        {
          "city": "Zürich",
          "latitude": 47.36667
        }
    """
    return json.dumps(
        data,
        indent=indent,
        ensure_ascii=False,
        sort_keys=sort_keys,
        default=str  # Handle non-serializable types
    )
