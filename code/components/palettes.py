"""
Palettes and position-to-color interpolation.

A palette is an ordered list of colors, each anchored at a stop in [0, 1].
ColorInterpolator turns any position in [0, 1] into a hex color by linear
RGB interpolation between the two bracketing stops. Both color scales in
color_mapping.py resolve their colors through it.
"""

import logging
import re
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from bokeh.palettes import (
    Category10,
    Category20,
    Cividis256,
    Inferno256,
    Magma256,
    Plasma256,
    Turbo256,
    Viridis256,
    all_palettes,
)

from core.errors import ConfigurationError
from utils.formatting import round_half_up

logger = logging.getLogger(__name__)

# 10-stop viridis used when no palette is configured
DEFAULT_PALETTE = (
    "#440154",
    "#482777",
    "#3f4a8a",
    "#31688e",
    "#26828e",
    "#1f9e89",
    "#35b779",
    "#6ece58",
    "#b5de2b",
    "#fde725",
)

# Gray for null/empty values, never produced by DEFAULT_PALETTE
NULL_COLOR = "#808080"

# Marker and glyph fill when no color column is selected
DEFAULT_MARKER_COLOR = "#3388ff"

NAMED_PALETTES = {
    "Category10": Category10,
    "Category20": Category20,
    "Viridis256": Viridis256,
    "Plasma256": Plasma256,
    "Magma256": Magma256,
    "Inferno256": Inferno256,
    "Turbo256": Turbo256,
    "Cividis256": Cividis256,
}

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def get_palette(palette_name: str) -> list[str]:
    """Get a color palette by name.

    Tries named palettes first, then looks in all_palettes. Dict-style
    palettes (keyed by size) resolve to their largest variant.
    """
    if palette_name in NAMED_PALETTES:
        palette = NAMED_PALETTES[palette_name]
        if isinstance(palette, dict):
            return list(palette[max(palette.keys())])
        return list(palette)

    if palette_name in all_palettes:
        palette_dict = all_palettes[palette_name]
        return list(palette_dict[max(palette_dict.keys())])

    raise ConfigurationError(f"Unknown palette name: {palette_name!r}")


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    match = _HEX_PATTERN.match(str(color).strip())
    if match is None:
        raise ConfigurationError(f"Not a 6-digit hex color: {color!r}")
    return tuple(int(group, 16) for group in match.groups())


def _rgb_to_hex(rgb: Sequence[int]) -> str:
    return "#" + "".join("{:02x}".format(min(255, max(0, int(c)))) for c in rgb)


@dataclass(frozen=True)
class Palette:
    """Colors (as RGB tuples) paired with ascending stops normalized to [0, 1]."""

    colors: tuple[tuple[int, int, int], ...]
    stops: tuple[float, ...]

    @classmethod
    def from_hex(
        cls,
        colors: Sequence[str],
        stops: Sequence[float] | None = None,
        reverse: bool = False,
    ) -> "Palette":
        """
        Build a palette from hex colors and optional stop positions.

        Args:
            colors: Hex colors, at least one
            stops: Position of each color; evenly spaced when omitted
            reverse: Flip the palette end to end

        Returns:
            Palette with stops sorted ascending and rescaled to [0, 1]

        Raises:
            ConfigurationError: If colors is empty, a color is malformed,
                or the number of stops differs from the number of colors
        """
        colors = list(colors)
        if len(colors) < 1:
            raise ConfigurationError("At least 1 color is required")
        if stops is not None and len(stops) != len(colors):
            raise ConfigurationError("stops must have the same length as colors")

        rgb = [_hex_to_rgb(color) for color in colors]

        if reverse:
            rgb = rgb[::-1]
            if stops is not None:
                stops = [-pos for pos in reversed(stops)]

        if len(rgb) == 1:
            return cls(colors=(rgb[0],), stops=(0.0,))

        if stops is None:
            positions = [i / (len(rgb) - 1) for i in range(len(rgb))]
            return cls(colors=tuple(rgb), stops=tuple(positions))

        # Sort stops and carry colors along; sorted() is stable for equal stops
        paired = sorted(zip((float(pos) for pos in stops), rgb), key=lambda p: p[0])
        positions = [pos for pos, _ in paired]
        ordered = [color for _, color in paired]

        min_pos, max_pos = positions[0], positions[-1]
        if min_pos == max_pos:
            positions = [0.0] * len(positions)
        else:
            positions = [(pos - min_pos) / (max_pos - min_pos) for pos in positions]

        return cls(colors=tuple(ordered), stops=tuple(positions))

    @property
    def hex_colors(self) -> list[str]:
        return [_rgb_to_hex(color) for color in self.colors]

    def __len__(self) -> int:
        return len(self.colors)


def resolve_palette(
    palette: "Palette | str | Sequence[str] | None" = None,
    stops: Sequence[float] | None = None,
    reverse: bool = False,
) -> Palette:
    """Accept a Palette, a bokeh palette name, a list of hex colors, or None for the default."""
    if isinstance(palette, Palette):
        if stops is not None or reverse:
            return Palette.from_hex(palette.hex_colors, stops or palette.stops, reverse)
        return palette
    if palette is None:
        colors = DEFAULT_PALETTE
    elif isinstance(palette, str):
        colors = get_palette(palette)
    else:
        colors = palette
    return Palette.from_hex(colors, stops, reverse)


@dataclass(frozen=True)
class ColorInterpolator:
    """Maps a position in [0, 1] to a hex color over a palette."""

    palette: Palette

    def color_at(self, t: float) -> str:
        """
        Return the palette color at position t.

        Positions outside the stop range extend the first/last color flat.
        Channels are interpolated independently and rounded half-up.
        """
        colors, stops = self.palette.colors, self.palette.stops

        if len(colors) == 1:
            return _rgb_to_hex(colors[0])

        t = min(1.0, max(0.0, float(t)))

        if t <= stops[0]:
            return _rgb_to_hex(colors[0])
        if t >= stops[-1]:
            return _rgb_to_hex(colors[-1])

        # Repeated stops resolve to the later color
        exact = np.flatnonzero(np.asarray(stops) == t)
        if exact.size:
            return _rgb_to_hex(colors[exact[-1]])

        rgb = np.asarray(colors, dtype=float)
        return _rgb_to_hex(
            [round_half_up(np.interp(t, stops, rgb[:, channel])) for channel in range(3)]
        )

    def color_at_index(self, index: int) -> str:
        return _rgb_to_hex(self.palette.colors[index])

    @property
    def first_color(self) -> str:
        return self.color_at_index(0)

    @property
    def last_color(self) -> str:
        return self.color_at_index(-1)

    def __len__(self) -> int:
        return len(self.palette)
