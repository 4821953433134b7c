"""Small formatting helpers shared by legends and glyphs."""

import math
import re


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up.

    Python's built-in round() uses banker's rounding, which would make
    2.5 -> 2 but 3.5 -> 4. Colors and glyph radii need the consistent form.
    """
    return int(math.floor(value + 0.5))


def format_title(name) -> str:
    """Turn a column name into a display title.

    Example: "sample_depth_m" -> "Sample depth m"
    """
    if not name:
        return ""
    out = re.sub(r"\s+", " ", str(name).replace("_", " ")).strip()
    return out[:1].upper() + out[1:]


def precision_for_range(data_min: float, data_max: float) -> int:
    """Number of decimals used to label values spanning [data_min, data_max]."""
    span = data_max - data_min
    if span < 1:
        return 2
    if span < 10:
        return 1
    return 0


def format_value(value: float, precision: int) -> str:
    return f"{value:.{precision}f}"
