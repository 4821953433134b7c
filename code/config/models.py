"""
Configuration dataclasses for the sample map.

This module provides typed configuration for marker styling and cluster glyphs.
"""

from dataclasses import dataclass, field


@dataclass
class ClusterGlyphConfig:
    """Sizing rules for cluster pie glyphs."""

    # With a size column: max(min_sized_radius, round(mean member radius * size_factor))
    min_sized_radius: int = 16
    size_factor: float = 1.4

    # Without one: max(min_count_radius, round(sqrt(member count) * count_factor))
    min_count_radius: int = 12
    count_factor: float = 4.0


@dataclass
class MapConfig:
    """
    Main marker styling configuration.

    Modify this class to adapt the map for a different dataset.
    """

    # Marker radius bounds in pixels
    min_radius: float = 4
    max_radius: float = 22
    # Gamma correction for the size scale (1.0 = linear)
    size_gamma: float = 1.0

    # Palette: None = built-in 10-stop viridis, otherwise a bokeh palette name
    palette_name: str | None = None
    palette_stops: list[float] | None = None
    reverse_palette: bool = False

    # Palette sub-ranges, so categorical and continuous legends can look distinct
    categorical_transform: tuple[float, float] = (0.0, 1.0)
    continuous_transform: tuple[float, float] = (0.0, 1.0)

    # Share of values that must parse as numbers for a column to count as numeric
    numeric_threshold: float = 0.8

    # Marker/glyph color when no color column is selected
    default_color: str = "#3388ff"
    # Marker and slice color for missing values
    null_color: str = "#808080"

    # Column holding a ";"-separated list of factor columns
    color_by_column: str = "color_by"
    # Never offered as factors
    excluded_columns: list[str] = field(default_factory=lambda: ["sample_id"])

    latitude_candidates: list[str] = field(default_factory=lambda: ["lat", "latitude", "y"])
    longitude_candidates: list[str] = field(
        default_factory=lambda: ["lon", "lng", "longitude", "x"]
    )

    cluster: ClusterGlyphConfig = field(default_factory=ClusterGlyphConfig)

    @property
    def default_radius(self) -> float:
        """Radius for markers without a usable size value."""
        return (self.min_radius + self.max_radius) / 2


DEFAULT_CONFIG = MapConfig()
