"""Scales, legends and cluster glyphs for styling map markers."""

from .cluster_glyph import ClusterAggregator, ClusterGlyph, PieSlice, pie_wedges
from .color_mapping import CategoricalColorScale, ContinuousColorScale, is_missing
from .legend import categorical_swatches, continuous_ticks, gradient_colors, size_references
from .markers import Marker
from .palettes import (
    DEFAULT_MARKER_COLOR,
    DEFAULT_PALETTE,
    NULL_COLOR,
    ColorInterpolator,
    Palette,
    get_palette,
    resolve_palette,
)
from .size_mapping import ContinuousSizeScale

__all__ = [
    "CategoricalColorScale",
    "ClusterAggregator",
    "ClusterGlyph",
    "ColorInterpolator",
    "ContinuousColorScale",
    "ContinuousSizeScale",
    "DEFAULT_MARKER_COLOR",
    "DEFAULT_PALETTE",
    "Marker",
    "NULL_COLOR",
    "Palette",
    "PieSlice",
    "categorical_swatches",
    "continuous_ticks",
    "get_palette",
    "gradient_colors",
    "is_missing",
    "pie_wedges",
    "resolve_palette",
    "size_references",
]
