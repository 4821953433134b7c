"""
One styling pass over the sample records.

A render pass is built whenever the user picks a different color or size
column: scales are fit to the full row set, every row with valid
coordinates becomes a styled Marker, and cluster glyphs are computed against
the same scale instances. Passes are immutable; a new selection builds a new
pass.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping

import pandas as pd

from components.cluster_glyph import ClusterAggregator, ClusterGlyph
from components.color_mapping import CategoricalColorScale, ColorScale, ContinuousColorScale
from components.markers import Marker
from components.palettes import resolve_palette
from components.size_mapping import ContinuousSizeScale
from config.models import DEFAULT_CONFIG, MapConfig
from data.columns import detect_numeric_columns, find_lat_lon_columns, records_to_frame
from utils.formatting import format_title

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ColorKind = Literal["continuous", "categorical"]


def build_color_scale(
    values: pd.Series, kind: ColorKind, config: MapConfig = DEFAULT_CONFIG
) -> ColorScale:
    """Fit the configured color scale of the given kind to a column."""
    palette = resolve_palette(config.palette_name, config.palette_stops, config.reverse_palette)
    if kind == "continuous":
        transform_min, transform_max = config.continuous_transform
        return ContinuousColorScale.from_values(
            values, transform_min, transform_max, palette=palette, null_color=config.null_color
        )
    if kind == "categorical":
        transform_min, transform_max = config.categorical_transform
        return CategoricalColorScale.from_values(
            values, transform_min, transform_max, palette=palette, null_color=config.null_color
        )
    raise ConfigurationError(f"Unknown color kind: {kind!r}")


def build_size_scale(values: pd.Series, config: MapConfig = DEFAULT_CONFIG) -> ContinuousSizeScale:
    return ContinuousSizeScale.from_values(
        values, config.min_radius, config.max_radius, config.size_gamma
    )


@dataclass(frozen=True)
class RenderPass:
    """Scales and styled markers for one color/size column selection."""

    color_column: str | None
    size_column: str | None
    color_scale: ColorScale | None
    size_scale: ContinuousSizeScale | None
    markers: tuple[Marker, ...]
    aggregator: ClusterAggregator = field(default_factory=ClusterAggregator)

    @classmethod
    def build(
        cls,
        records: "Iterable[Mapping[str, Any]] | pd.DataFrame",
        color_column: str | None = None,
        size_column: str | None = None,
        config: MapConfig = DEFAULT_CONFIG,
        color_kind: ColorKind | None = None,
    ) -> "RenderPass":
        """
        Fit scales to the records and style every located row.

        Args:
            records: Parsed rows (column name -> value)
            color_column: Column driving marker color (None for a single color)
            size_column: Column driving marker radius (None for a fixed radius)
            config: Styling configuration
            color_kind: Force "continuous" or "categorical"; detected with
                the numeric-ratio heuristic when None

        Returns:
            RenderPass with one Marker per row that has numeric coordinates

        Raises:
            ConfigurationError: If coordinates are missing, a column is unknown,
                or a scale cannot be fit
        """
        df = records_to_frame(records)

        latitude, longitude = find_lat_lon_columns(
            df.columns, config.latitude_candidates, config.longitude_candidates
        )
        if not latitude or not longitude:
            raise ConfigurationError("Records must include latitude and longitude columns")

        for column in (color_column, size_column):
            if column and column not in df.columns:
                raise ConfigurationError(f"Unknown column: {column!r}")

        color_scale = None
        if color_column:
            if color_kind is None:
                numeric = detect_numeric_columns(df, [color_column], config.numeric_threshold)
                color_kind = "continuous" if numeric else "categorical"
            color_scale = build_color_scale(df[color_column], color_kind, config)

        size_scale = build_size_scale(df[size_column], config) if size_column else None

        lat = pd.to_numeric(df[latitude], errors="coerce")
        lon = pd.to_numeric(df[longitude], errors="coerce")
        located = lat.notna() & lon.notna()
        if not located.all():
            logger.info(f"Skipping {int((~located).sum())} rows without valid coordinates")

        if size_scale is not None:
            radii = pd.Series(size_scale.radii_of(df[size_column]), index=df.index)
        else:
            radii = pd.Series(config.default_radius, index=df.index, dtype=float)

        color_values = df[color_column] if color_column else None
        markers = []
        for idx, row in df[located].iterrows():
            color_value = color_values[idx] if color_values is not None else None
            color = color_scale.color_of(color_value) if color_scale else config.default_color
            markers.append(
                Marker(
                    latitude=float(lat[idx]),
                    longitude=float(lon[idx]),
                    color=color,
                    radius=float(radii[idx]),
                    color_value=color_value,
                    properties=row.to_dict(),
                )
            )

        logger.debug(
            f"Render pass: color={color_column} ({color_kind}), size={size_column}, "
            f"{len(markers)} markers"
        )
        return cls(
            color_column=color_column,
            size_column=size_column,
            color_scale=color_scale,
            size_scale=size_scale,
            markers=tuple(markers),
            aggregator=ClusterAggregator(config.cluster, config.default_color),
        )

    @property
    def color_is_continuous(self) -> bool:
        return isinstance(self.color_scale, ContinuousColorScale)

    @property
    def color_title(self) -> str:
        """Display title for the color legend."""
        return format_title(self.color_column)

    @property
    def size_title(self) -> str:
        return format_title(self.size_column)

    def cluster_glyph(self, members: Iterable[Marker]) -> ClusterGlyph:
        """Pie glyph for a cluster of this pass's markers."""
        return self.aggregator.build(members, self.color_scale, self.size_scale)
