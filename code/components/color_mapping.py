"""
Color scales for map markers.

Handles both categorical and continuous color mapping:
- ContinuousColorScale: numeric value -> color over a palette sub-range
- CategoricalColorScale: category -> color, ranked by frequency

Both scales are immutable once built. Null, NaN and empty values always
map to NULL_COLOR.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from core.errors import ConfigurationError, UnknownCategoryError

from .palettes import NULL_COLOR, ColorInterpolator, Palette, resolve_palette

logger = logging.getLogger(__name__)


def is_missing(value: Any) -> bool:
    """True for None, NaN/NA and the empty string."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Array-likes make pd.isna return an array
        return False


def to_number(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _check_transform_range(transform_min: float, transform_max: float) -> None:
    for bound in (transform_min, transform_max):
        if not 0.0 <= bound <= 1.0:
            raise ConfigurationError(
                f"Transform range must lie within [0, 1], got ({transform_min}, {transform_max})"
            )


@dataclass(frozen=True)
class ContinuousColorScale:
    """
    Maps numeric values onto a palette.

    Values are clamped to [data_min, data_max], normalized, then compressed
    into [transform_min, transform_max] before the palette lookup. Passing a
    transform range with transform_min > transform_max runs the palette
    backwards.
    """

    data_min: float
    data_max: float
    transform_min: float = 0.0
    transform_max: float = 1.0
    palette: Palette = field(default_factory=resolve_palette)
    null_color: str = NULL_COLOR

    def __post_init__(self):
        if not isinstance(self.palette, Palette):
            object.__setattr__(self, "palette", resolve_palette(self.palette))
        data_min, data_max = to_number(self.data_min), to_number(self.data_max)
        if data_min is None or data_max is None:
            raise ConfigurationError(
                f"Data range must be numeric, got ({self.data_min!r}, {self.data_max!r})"
            )
        object.__setattr__(self, "data_min", data_min)
        object.__setattr__(self, "data_max", data_max)
        if self.data_min > self.data_max:
            raise ConfigurationError(
                f"data_min ({self.data_min}) must not exceed data_max ({self.data_max})"
            )
        _check_transform_range(self.transform_min, self.transform_max)

    @classmethod
    def from_values(
        cls,
        values: Iterable[Any],
        transform_min: float = 0.0,
        transform_max: float = 1.0,
        palette: "Palette | str | Sequence[str] | None" = None,
        stops: Sequence[float] | None = None,
        reverse: bool = False,
        null_color: str = NULL_COLOR,
    ) -> "ContinuousColorScale":
        """
        Build a scale spanning the observed numeric range of values.

        Non-numeric entries are coerced to NaN and ignored.

        Raises:
            ConfigurationError: If no numeric value is present
        """
        numeric = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce").dropna()
        if numeric.empty:
            raise ConfigurationError("Cannot build a continuous color scale without numeric values")

        scale = cls(
            data_min=float(numeric.min()),
            data_max=float(numeric.max()),
            transform_min=transform_min,
            transform_max=transform_max,
            palette=resolve_palette(palette, stops, reverse),
            null_color=null_color,
        )
        logger.debug(
            f"Continuous color scale over [{scale.data_min}, {scale.data_max}] "
            f"({len(scale.palette)} colors)"
        )
        return scale

    @property
    def interpolator(self) -> ColorInterpolator:
        return ColorInterpolator(self.palette)

    @property
    def is_degenerate(self) -> bool:
        return self.data_min == self.data_max

    def color_of(self, value: Any) -> str:
        """
        Get the color for a numeric value.

        Args:
            value: Number (or numeric string); missing and non-numeric values
                map to the null color

        Returns:
            Hex color string
        """
        if is_missing(value):
            return self.null_color
        number = to_number(value)
        if number is None:
            return self.null_color

        interpolator = self.interpolator
        if len(interpolator) == 1:
            return interpolator.first_color

        if self.is_degenerate:
            if number < self.data_min:
                return interpolator.first_color
            if number > self.data_max:
                return interpolator.last_color
            return interpolator.color_at_index(len(interpolator) // 2)

        clamped = max(self.data_min, min(self.data_max, number))
        data_t = (clamped - self.data_min) / (self.data_max - self.data_min)
        transformed_t = self.transform_min + data_t * (self.transform_max - self.transform_min)
        return interpolator.color_at(max(0.0, min(1.0, transformed_t)))

    def colors_of(self, values: Iterable[Any]) -> list[str]:
        return [self.color_of(value) for value in values]


def category_key(value: Any) -> Any:
    # NaN != NaN, so every missing value (empty strings included) shares the None key
    if is_missing(value):
        return None
    return value


@dataclass(frozen=True)
class CategoricalColorScale:
    """
    Maps categories to colors spread evenly across a palette sub-range.

    Categories are ordered by descending frequency (ties keep first-seen
    order), so the most common categories always receive well-separated
    colors. Build instances with from_values().
    """

    categories: tuple
    category_colors: Mapping[Any, str]
    counts: Mapping[Any, int]
    transform_min: float = 0.0
    transform_max: float = 1.0
    palette: Palette = field(default_factory=resolve_palette)
    null_color: str = NULL_COLOR
    _ranks: Mapping[Any, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.categories:
            raise ConfigurationError("A categorical color scale needs at least one category")
        missing = [c for c in self.categories if c not in self.category_colors]
        if missing:
            raise ConfigurationError(f"Categories without an assigned color: {missing}")
        object.__setattr__(self, "category_colors", MappingProxyType(dict(self.category_colors)))
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))
        object.__setattr__(
            self, "_ranks", MappingProxyType({c: i for i, c in enumerate(self.categories)})
        )

    @classmethod
    def from_values(
        cls,
        category_data: Iterable[Any],
        transform_min: float = 0.0,
        transform_max: float = 1.0,
        palette: "Palette | str | Sequence[str] | None" = None,
        stops: Sequence[float] | None = None,
        reverse: bool = False,
        null_color: str = NULL_COLOR,
    ) -> "CategoricalColorScale":
        """
        Rank the observed categories and assign each one a color.

        Null values are counted too (under the None key) so they keep a rank,
        although color_of() still returns the null color for them.

        Args:
            category_data: Every observed value of the color column
            transform_min: Palette position of the most frequent category
            transform_max: Palette position of the least frequent category
            palette: Palette, bokeh palette name, hex colors, or None for default
            stops: Optional stop positions for a list of hex colors
            reverse: Flip the palette
            null_color: Color for missing values

        Raises:
            ConfigurationError: If category_data is empty or the palette is invalid
        """
        frequencies = Counter(category_key(value) for value in category_data)
        if not frequencies:
            raise ConfigurationError("category_data must be non-empty")
        _check_transform_range(transform_min, transform_max)

        # sorted() is stable: equal counts keep first-seen order
        ranked = [c for c, _ in sorted(frequencies.items(), key=lambda item: -item[1])]

        resolved = resolve_palette(palette, stops, reverse)
        interpolator = ColorInterpolator(resolved)

        if len(ranked) == 1:
            positions = [transform_min]
        else:
            positions = [
                transform_min + (i / (len(ranked) - 1)) * (transform_max - transform_min)
                for i in range(len(ranked))
            ]
        colors = {c: interpolator.color_at(t) for c, t in zip(ranked, positions)}

        logger.debug(f"Categorical color scale with {len(ranked)} categories")
        return cls(
            categories=tuple(ranked),
            category_colors=colors,
            counts=dict(frequencies),
            transform_min=transform_min,
            transform_max=transform_max,
            palette=resolved,
            null_color=null_color,
        )

    def rank_of(self, category: Any) -> int:
        """Frequency rank of a category (0 = most frequent)."""
        try:
            return self._ranks[category_key(category)]
        except (KeyError, TypeError):
            raise UnknownCategoryError(category) from None

    def color_of(self, category: Any) -> str:
        """
        Get the color assigned to a category.

        Raises:
            UnknownCategoryError: If the category was not seen at construction
        """
        if is_missing(category):
            return self.null_color
        try:
            return self.category_colors[category]
        except (KeyError, TypeError):
            raise UnknownCategoryError(category) from None

    def colors_of(self, categories: Iterable[Any]) -> list[str]:
        return [self.color_of(category) for category in categories]


ColorScale = ContinuousColorScale | CategoricalColorScale
