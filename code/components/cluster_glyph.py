"""
Pie-chart glyphs for marker clusters.

ClusterAggregator summarizes the members of one cluster as an ordered list
of (count, color) slices plus an overall glyph radius. The spatial grouping
of markers into clusters happens elsewhere; here membership is given.

For continuous color columns, members are grouped by their resolved hex
color rather than binned numerically, so values whose interpolated colors
round to the same hex share a slice.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from config.models import ClusterGlyphConfig
from utils.formatting import round_half_up

from .color_mapping import (
    CategoricalColorScale,
    ColorScale,
    ContinuousColorScale,
    category_key,
    to_number,
)
from .markers import Marker
from .palettes import DEFAULT_MARKER_COLOR, NULL_COLOR
from .size_mapping import ContinuousSizeScale

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PieSlice:
    count: int
    color: str


def pie_wedges(slices: Sequence[PieSlice]) -> list[tuple[float, float]]:
    """
    Start and end angle (radians) of each slice.

    Each slice ends at 2*pi times the running fraction of the total count,
    so the last slice always closes the circle.
    """
    total = sum(s.count for s in slices) or 1
    wedges = []
    running = 0
    start = 0.0
    for s in slices:
        running += s.count
        end = 2 * math.pi * running / total
        wedges.append((start, end))
        start = end
    return wedges


@dataclass(frozen=True)
class ClusterGlyph:
    """Slices in drawing order plus the glyph radius in pixels."""

    slices: tuple[PieSlice, ...]
    radius: int

    @property
    def total(self) -> int:
        return sum(s.count for s in self.slices)

    def wedges(self) -> list[tuple[float, float]]:
        return pie_wedges(self.slices)

    def to_svg(self) -> str:
        """Render the glyph as an SVG pie with the member count in the middle."""
        r = self.radius
        cx = cy = r
        parts = []
        for s, (start, end) in zip(self.slices, self.wedges()):
            if s.count == 0:
                continue
            if end - start >= 2 * math.pi - 1e-9:
                # A lone slice is a full circle; an arc cannot start and end on the same point
                parts.append(
                    f'<circle cx="{cx}" cy="{cy}" r="{r}" fill="{s.color}" '
                    f'stroke="#222" stroke-width="0.6"></circle>'
                )
                continue
            x1 = cx + r * math.cos(start)
            y1 = cy + r * math.sin(start)
            x2 = cx + r * math.cos(end)
            y2 = cy + r * math.sin(end)
            large = 1 if end - start > math.pi else 0
            parts.append(
                f'<path d="M {cx} {cy} L {x1:.2f} {y1:.2f} A {r} {r} 0 {large} 1 {x2:.2f} {y2:.2f} Z" '
                f'fill="{s.color}" stroke="#222" stroke-width="0.6"></path>'
            )

        font_size = max(10, r * 0.4)
        return (
            f'<svg width="{r * 2}" height="{r * 2}" viewBox="0 0 {r * 2} {r * 2}" '
            f'xmlns="http://www.w3.org/2000/svg">'
            + "".join(parts)
            + f'<circle cx="{cx}" cy="{cy}" r="{r * 0.3:.2f}" fill="rgba(255,255,255,0.9)" '
            f'stroke="#222" stroke-width="0.6"></circle>'
            f'<text x="{cx}" y="{cy + 4}" font-size="{font_size:g}" font-weight="600" '
            f'text-anchor="middle" fill="#111">{self.total}</text></svg>'
        )


@dataclass(frozen=True)
class ClusterAggregator:
    """Builds a ClusterGlyph from a cluster's member markers."""

    config: ClusterGlyphConfig = field(default_factory=ClusterGlyphConfig)
    default_color: str = DEFAULT_MARKER_COLOR

    def build(
        self,
        members: Iterable[Marker],
        color_scale: ColorScale | None = None,
        size_scale: ContinuousSizeScale | None = None,
    ) -> ClusterGlyph:
        """
        Summarize a cluster as pie slices.

        Args:
            members: Markers in the cluster, each already colored and sized
            color_scale: Scale that colored the markers (None if no color column)
            size_scale: Scale that sized the markers (None if no size column)

        Returns:
            ClusterGlyph whose slices sum to the member count, with the null
            color slice (if any) last

        Raises:
            ValueError: If members is empty
            UnknownCategoryError: If a member's category is unknown to color_scale
        """
        members = list(members)
        if not members:
            raise ValueError("Cannot build a glyph for an empty cluster")

        ordered = self._order_members(members, color_scale)
        slices = self._group(ordered, color_scale)

        null_color = color_scale.null_color if color_scale is not None else NULL_COLOR
        slices = [s for s in slices if s.color != null_color] + [
            s for s in slices if s.color == null_color
        ]

        glyph = ClusterGlyph(slices=tuple(slices), radius=self._glyph_radius(members, size_scale))
        logger.debug(f"Cluster of {len(members)} -> {len(slices)} slices, r={glyph.radius}")
        return glyph

    @staticmethod
    def _order_members(
        members: list[Marker], color_scale: ColorScale | None
    ) -> list[Marker]:
        if isinstance(color_scale, CategoricalColorScale):
            return sorted(members, key=lambda m: color_scale.rank_of(m.color_value))
        if isinstance(color_scale, ContinuousColorScale):

            def numeric_key(marker: Marker):
                number = to_number(marker.color_value)
                return (number is None, number if number is not None else 0.0)

            return sorted(members, key=numeric_key)
        return members

    def _group(self, ordered: list[Marker], color_scale: ColorScale | None) -> list[PieSlice]:
        if color_scale is None:
            return [PieSlice(count=len(ordered), color=self.default_color)]

        counts: dict = {}
        if isinstance(color_scale, CategoricalColorScale):
            for m in ordered:
                key = category_key(m.color_value)
                counts[key] = counts.get(key, 0) + 1
            return [
                PieSlice(count=count, color=color_scale.color_of(category))
                for category, count in counts.items()
            ]

        for m in ordered:
            counts[m.color] = counts.get(m.color, 0) + 1
        return [PieSlice(count=count, color=color) for color, count in counts.items()]

    def _glyph_radius(self, members: list[Marker], size_scale: ContinuousSizeScale | None) -> int:
        cfg = self.config
        if size_scale is not None:
            mean_radius = sum(m.radius for m in members) / len(members)
            return max(cfg.min_sized_radius, round_half_up(mean_radius * cfg.size_factor))
        return max(cfg.min_count_radius, round_half_up(math.sqrt(len(members)) * cfg.count_factor))
