"""
Data layer for the sample map.

This package turns already-parsed records into tables and detects which
columns can be mapped to marker styling.
"""

from .columns import (
    default_selection,
    detect_numeric_columns,
    factor_columns,
    find_lat_lon_columns,
    records_to_frame,
)

__all__ = [
    "default_selection",
    "detect_numeric_columns",
    "factor_columns",
    "find_lat_lon_columns",
    "records_to_frame",
]
