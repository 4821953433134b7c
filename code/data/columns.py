"""
Column detection for already-parsed sample records.

Finds the coordinate columns, the factor columns that may drive color or
size, and which of those are numeric.
"""

import logging
from typing import Any, Iterable, Mapping

import pandas as pd

from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def records_to_frame(records: "Iterable[Mapping[str, Any]] | pd.DataFrame") -> pd.DataFrame:
    """
    Collect parsed records into a DataFrame.

    Raises:
        ConfigurationError: If there are no records
    """
    if isinstance(records, pd.DataFrame):
        df = records.reset_index(drop=True)
    else:
        df = pd.DataFrame(list(records))
    if df.empty:
        raise ConfigurationError("No rows to display")
    return df


def detect_numeric_columns(
    df: pd.DataFrame,
    columns: Iterable[str] | None = None,
    threshold: float = 0.8,
) -> list[str]:
    """
    Get columns where at least `threshold` of all rows parse as numbers.

    Missing and empty cells count toward the total but never as numeric,
    so sparse columns need proportionally more numeric entries.

    Args:
        df: DataFrame of records
        columns: Columns to check (all columns when None)
        threshold: Minimum numeric share, in [0, 1]

    Returns:
        Numeric column names, in the order checked
    """
    columns = list(df.columns) if columns is None else list(columns)
    numeric = []
    for col in columns:
        values = df[col]
        if len(values) == 0:
            continue
        blank = values.isna() | (values.astype(str).str.strip() == "")
        parsed = pd.to_numeric(values.where(~blank), errors="coerce")
        if parsed.notna().sum() / len(values) >= threshold:
            numeric.append(col)
    return numeric


def find_lat_lon_columns(
    columns: Iterable[str],
    latitude_candidates: Iterable[str] = ("lat", "latitude", "y"),
    longitude_candidates: Iterable[str] = ("lon", "lng", "longitude", "x"),
) -> tuple[str | None, str | None]:
    """Return the first latitude-like and longitude-like column names (case-insensitive)."""
    columns = list(columns)
    lat_names = {c.lower() for c in latitude_candidates}
    lon_names = {c.lower() for c in longitude_candidates}
    latitude = next((c for c in columns if str(c).lower() in lat_names), None)
    longitude = next((c for c in columns if str(c).lower() in lon_names), None)
    return latitude, longitude


def factor_columns(
    df: pd.DataFrame,
    latitude: str,
    longitude: str,
    color_by_column: str = "color_by",
    excluded_columns: Iterable[str] = ("sample_id",),
) -> list[str]:
    """
    Columns eligible to drive color or size.

    If a `color_by` column is present, the ";"-separated list in its first
    row names the factors. Otherwise every column except the coordinates
    and the excluded ones is a factor.
    """
    if color_by_column in df.columns and len(df) > 0:
        listed = df[color_by_column].iloc[0]
        if isinstance(listed, str) and listed.strip():
            factors = [c.strip() for c in listed.split(";") if c.strip()]
            missing = [c for c in factors if c not in df.columns]
            if missing:
                logger.warning(f"{color_by_column} names unknown columns: {missing}")
            return [c for c in factors if c in df.columns]

    skip = {latitude, longitude, color_by_column, *excluded_columns}
    factors = [c for c in df.columns if c not in skip]
    if not factors:
        factors = [c for c in df.columns if c not in {latitude, longitude, color_by_column}]
    return factors


def default_selection(
    factors: list[str], numeric_columns: Iterable[str]
) -> tuple[str | None, str | None]:
    """
    Pick the initial (size, color) columns.

    Size is the first numeric factor; color is the first factor that is not
    the size column.
    """
    numeric = set(numeric_columns)
    size_column = next((c for c in factors if c in numeric), None)
    color_column = next((c for c in factors if c != size_column), None)
    return size_column, color_column
