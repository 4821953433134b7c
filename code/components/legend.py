"""
Legend data for the color and size scales.

Produces plain values (tick labels, swatches, reference radii) that a
rendering layer can draw however it likes.
"""

from dataclasses import dataclass

import numpy as np

from utils.formatting import format_value, precision_for_range

from .color_mapping import CategoricalColorScale, ContinuousColorScale
from .size_mapping import ContinuousSizeScale

MISSING_LABEL = "Missing"


@dataclass(frozen=True)
class LegendTick:
    position: float  # fraction of the bar width, 0..1
    label: str


@dataclass(frozen=True)
class LegendSwatch:
    label: str
    color: str


@dataclass(frozen=True)
class SizeReference:
    label: str
    radius: float


def continuous_ticks(scale: ContinuousColorScale, tick_count: int = 5) -> list[LegendTick]:
    """
    Evenly spaced tick labels along a continuous color bar.

    Label precision depends on the data span: 2 decimals below 1,
    1 decimal below 10, otherwise none.
    """
    precision = precision_for_range(scale.data_min, scale.data_max)
    ticks = []
    for t in np.linspace(0, 1, max(tick_count, 2)):
        value = scale.data_min + (scale.data_max - scale.data_min) * t
        ticks.append(LegendTick(position=float(t), label=format_value(value, precision)))
    return ticks


def gradient_colors(scale: ContinuousColorScale, n_colors: int = 256) -> list[str]:
    """Sample the scale's colors across its data range, for drawing a gradient bar."""
    values = np.linspace(scale.data_min, scale.data_max, n_colors)
    return scale.colors_of(values)


def categorical_swatches(scale: CategoricalColorScale) -> list[LegendSwatch]:
    """One swatch per category in frequency order, missing values labelled last."""
    swatches = []
    has_missing = False
    for category in scale.categories:
        if category is None:
            has_missing = True
            continue
        swatches.append(LegendSwatch(label=str(category), color=scale.color_of(category)))
    if has_missing:
        swatches.append(LegendSwatch(label=MISSING_LABEL, color=scale.null_color))
    return swatches


def size_references(scale: ContinuousSizeScale) -> list[SizeReference]:
    """Smallest, middle and largest marker sizes with their data values."""
    precision = precision_for_range(scale.data_min, scale.data_max)
    middle = (scale.data_min + scale.data_max) / 2
    return [
        SizeReference(label=format_value(value, precision), radius=scale.radius_of(value))
        for value in (scale.data_min, middle, scale.data_max)
    ]
