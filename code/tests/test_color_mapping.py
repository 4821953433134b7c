"""
Tests for the continuous and categorical color scales.

Run with:
    pytest code/tests/test_color_mapping.py -v
"""

import dataclasses
import sys
from pathlib import Path

# Add code directory to path for imports
code_dir = Path(__file__).parent.parent
sys.path.insert(0, str(code_dir))

import numpy as np
import pytest

from components.color_mapping import CategoricalColorScale, ContinuousColorScale, is_missing
from components.palettes import DEFAULT_PALETTE, NULL_COLOR, ColorInterpolator, resolve_palette
from core.errors import ConfigurationError, UnknownCategoryError


def _channels(color: str) -> tuple[int, int, int]:
    return tuple(int(color[i : i + 2], 16) for i in (1, 3, 5))


class TestIsMissing:
    """Test the shared null check."""

    def test_missing_values(self):
        """Test that None, NaN and '' count as missing."""
        assert is_missing(None)
        assert is_missing(float("nan"))
        assert is_missing(np.nan)
        assert is_missing("")

    def test_present_values(self):
        """Test that zero and ordinary strings are not missing."""
        assert not is_missing(0)
        assert not is_missing("a")
        assert not is_missing(" ")


class TestContinuousColorScale:
    """Test ContinuousColorScale.color_of."""

    def test_endpoints_map_to_palette_ends(self):
        """Test that data_min and data_max give the first and last colors."""
        scale = ContinuousColorScale(0, 10)

        assert scale.color_of(0) == DEFAULT_PALETTE[0]
        assert scale.color_of(10) == DEFAULT_PALETTE[-1]

    def test_midpoint_interpolates_between_middle_stops(self):
        """Test the halfway value against the palette interpolated at t=0.5."""
        scale = ContinuousColorScale(0, 10)
        color = scale.color_of(5)

        assert color == ColorInterpolator(resolve_palette(None)).color_at(0.5)
        r, g, b = _channels(color)
        # Halfway between #26828e and #1f9e89
        assert r in (34, 35)
        assert g == 144
        assert b in (139, 140)

    def test_values_outside_range_clamp(self):
        """Test that out-of-range values take the end colors."""
        scale = ContinuousColorScale(0, 10)

        assert scale.color_of(-5) == DEFAULT_PALETTE[0]
        assert scale.color_of(50) == DEFAULT_PALETTE[-1]

    def test_missing_values_are_gray(self):
        """Test that None, '' and NaN all give the null color."""
        scale = ContinuousColorScale(0, 10)

        assert scale.color_of(None) == NULL_COLOR
        assert scale.color_of("") == NULL_COLOR
        assert scale.color_of(float("nan")) == NULL_COLOR

    def test_numeric_strings_are_parsed(self):
        """Test that numeric strings are treated as numbers."""
        scale = ContinuousColorScale(0, 10)

        assert scale.color_of("10") == DEFAULT_PALETTE[-1]
        assert scale.color_of("abc") == NULL_COLOR

    def test_transform_range_compresses_palette(self):
        """Test that data_max lands on transform_max rather than the last stop."""
        scale = ContinuousColorScale(0, 10, transform_min=0.0, transform_max=5 / 9)

        assert scale.color_of(0) == DEFAULT_PALETTE[0]
        assert scale.color_of(10) == DEFAULT_PALETTE[5]

    def test_reversed_transform_runs_backwards(self):
        """Test that transform_min > transform_max flips the palette."""
        scale = ContinuousColorScale(0, 10, transform_min=1.0, transform_max=0.0)

        assert scale.color_of(0) == DEFAULT_PALETTE[-1]
        assert scale.color_of(10) == DEFAULT_PALETTE[0]

    def test_degenerate_range(self):
        """Test the single-value data range."""
        scale = ContinuousColorScale(5, 5)

        assert scale.is_degenerate
        assert scale.color_of(5) == DEFAULT_PALETTE[5]
        assert scale.color_of(3) == DEFAULT_PALETTE[0]
        assert scale.color_of(9) == DEFAULT_PALETTE[-1]

    def test_single_color_palette(self):
        """Test that a one-color palette colors every value the same."""
        scale = ContinuousColorScale(0, 10, palette=["#123456"])

        assert scale.color_of(3) == "#123456"
        assert scale.color_of(None) == NULL_COLOR

    def test_repeated_queries_are_identical(self):
        """Test that the scale has no state drift across calls."""
        scale = ContinuousColorScale(0, 7)

        first = [scale.color_of(v) for v in np.linspace(-1, 8, 50)]
        second = [scale.color_of(v) for v in np.linspace(-1, 8, 50)]
        assert first == second

    def test_scale_is_immutable(self):
        """Test that fields cannot be reassigned after construction."""
        scale = ContinuousColorScale(0, 10)

        with pytest.raises(dataclasses.FrozenInstanceError):
            scale.data_min = 3

    def test_from_values_uses_numeric_range(self):
        """Test that from_values ignores missing and non-numeric entries."""
        scale = ContinuousColorScale.from_values([3, "7", None, 1, "x"])

        assert scale.data_min == 1
        assert scale.data_max == 7

    def test_from_values_requires_a_number(self):
        """Test that a column without numbers cannot build a scale."""
        with pytest.raises(ConfigurationError):
            ContinuousColorScale.from_values([None, "x"])

    def test_inverted_range_is_rejected(self):
        """Test that data_min > data_max is a configuration error."""
        with pytest.raises(ConfigurationError):
            ContinuousColorScale(10, 0)

    def test_transform_outside_unit_range_is_rejected(self):
        """Test that transform bounds must stay within [0, 1]."""
        with pytest.raises(ConfigurationError):
            ContinuousColorScale(0, 10, transform_min=-0.1)


class TestCategoricalColorScale:
    """Test CategoricalColorScale construction and lookup."""

    def test_ranks_by_descending_frequency(self):
        """Test that categories are ordered most frequent first."""
        scale = CategoricalColorScale.from_values(["c", "a", "b", "a", "b", "a"])

        assert scale.categories == ("a", "b", "c")
        assert scale.counts["a"] == 3

    def test_colors_spread_across_palette(self):
        """Test that first and last ranked categories get the palette ends."""
        scale = CategoricalColorScale.from_values(["a", "a", "a", "b", "b", "c"])

        assert scale.color_of("a") == DEFAULT_PALETTE[0]
        assert scale.color_of("c") == DEFAULT_PALETTE[-1]
        assert scale.color_of("b") == ColorInterpolator(resolve_palette(None)).color_at(0.5)
        assert scale.color_of("a") != scale.color_of("c")

    def test_unknown_category_raises(self):
        """Test that an unseen category is an error, not a default color."""
        scale = CategoricalColorScale.from_values(["a", "a", "a", "b", "b", "c"])

        with pytest.raises(UnknownCategoryError) as excinfo:
            scale.color_of("z")
        assert excinfo.value.category == "z"
        assert isinstance(excinfo.value, KeyError)

    def test_ties_keep_first_seen_order(self):
        """Test that equally frequent categories keep their first appearance order."""
        scale = CategoricalColorScale.from_values(["x", "y", "y", "x", "z"])

        assert scale.categories == ("x", "y", "z")

    def test_nulls_are_ranked_but_gray(self):
        """Test that null values hold a rank yet always render gray."""
        scale = CategoricalColorScale.from_values(["a", None, float("nan"), "b", None])

        assert scale.categories == (None, "a", "b")
        assert scale.rank_of(None) == 0
        assert scale.rank_of(float("nan")) == 0
        assert scale.color_of(None) == NULL_COLOR
        assert scale.color_of("") == NULL_COLOR

    def test_empty_strings_share_the_missing_rank(self):
        """Test that empty strings and None are one missing category."""
        scale = CategoricalColorScale.from_values(["a", "a", "a", "", None, "b"])

        assert scale.categories == ("a", None, "b")
        assert scale.rank_of("") == scale.rank_of(None) == 1
        assert scale.color_of("b") == DEFAULT_PALETTE[-1]
        assert scale.color_of("") == NULL_COLOR

    def test_single_category_uses_transform_min(self):
        """Test that a lone category sits at the start of the transform range."""
        assert CategoricalColorScale.from_values(["only"]).color_of("only") == DEFAULT_PALETTE[0]

        shifted = CategoricalColorScale.from_values(["only"], transform_min=5 / 9)
        assert shifted.color_of("only") == DEFAULT_PALETTE[5]

    def test_transform_subrange(self):
        """Test that the least frequent category lands on transform_max."""
        scale = CategoricalColorScale.from_values(["a", "a", "b"], transform_max=5 / 9)

        assert scale.color_of("a") == DEFAULT_PALETTE[0]
        assert scale.color_of("b") == DEFAULT_PALETTE[5]

    def test_single_color_palette(self):
        """Test that every category shares a one-color palette's color."""
        scale = CategoricalColorScale.from_values(["a", "b", "c"], palette=["#123456"])

        assert {scale.color_of(c) for c in "abc"} == {"#123456"}

    def test_every_category_gets_a_color(self):
        """Test that long-tail categories are colored, not bucketed."""
        values = [f"cat{i}" for i in range(30)]
        scale = CategoricalColorScale.from_values(values)

        assert len(scale.category_colors) == 30
        for value in values:
            assert scale.color_of(value).startswith("#")

    def test_rank_of_unknown_raises(self):
        """Test that rank_of rejects unseen categories too."""
        scale = CategoricalColorScale.from_values(["a"])

        with pytest.raises(UnknownCategoryError):
            scale.rank_of("b")

    def test_empty_category_list_is_rejected(self):
        """Test that a scale needs at least one observed value."""
        with pytest.raises(ConfigurationError):
            CategoricalColorScale.from_values([])

    def test_category_colors_are_read_only(self):
        """Test that the category->color mapping cannot be mutated."""
        scale = CategoricalColorScale.from_values(["a", "b"])

        with pytest.raises(TypeError):
            scale.category_colors["a"] = "#000000"
