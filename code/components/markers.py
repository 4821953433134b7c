"""Styled map marker produced by a render pass."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class Marker:
    """
    A located sample with its resolved styling.

    color_value keeps the raw value the color was derived from, so cluster
    glyphs can regroup members without going back to the source rows.
    """

    latitude: float
    longitude: float
    color: str
    radius: float
    color_value: Any = None
    properties: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
