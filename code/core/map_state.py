"""
Reactive state for the sample map.

MapState holds the records and the current color/size selection. Any change
to them rebuilds the render pass. A pass that fails leaves the previous one
in place, so the last good map stays on screen.
"""

import logging

import pandas as pd
import param

from config.models import DEFAULT_CONFIG, MapConfig
from data.columns import (
    default_selection,
    detect_numeric_columns,
    factor_columns,
    find_lat_lon_columns,
    records_to_frame,
)

from .errors import ScaleError
from .render_pass import RenderPass

logger = logging.getLogger(__name__)


class MapState(param.Parameterized):
    """
    Centralized holder for the map's reactive state.

    Attributes:
        records: All parsed sample records
        color_column: Column driving marker color (None for a single color)
        size_column: Column driving marker radius (None for a fixed radius)
        render_pass: Styling built for the current selection
        last_error: Message from the most recent failed pass ("" after success)
    """

    records = param.DataFrame(default=pd.DataFrame(), doc="Parsed sample records")
    color_column = param.String(default=None, allow_None=True, doc="Selected color column")
    size_column = param.String(default=None, allow_None=True, doc="Selected size column")
    render_pass = param.ClassSelector(
        class_=RenderPass, default=None, allow_None=True, doc="Current render pass"
    )
    last_error = param.String(default="", doc="Error from the last failed render pass")

    def __init__(self, map_config: MapConfig = DEFAULT_CONFIG, **params):
        super().__init__(**params)
        self.map_config = map_config
        self.rebuild()

    @classmethod
    def from_records(cls, records: pd.DataFrame, map_config: MapConfig = DEFAULT_CONFIG) -> "MapState":
        """Create state with the default size/color selection for these records."""
        records = records_to_frame(records)
        size_column, color_column = default_selection(
            cls.factor_columns_of(records, map_config),
            detect_numeric_columns(records, threshold=map_config.numeric_threshold),
        )
        return cls(
            map_config=map_config,
            records=records,
            color_column=color_column,
            size_column=size_column,
        )

    @staticmethod
    def factor_columns_of(records: pd.DataFrame, map_config: MapConfig = DEFAULT_CONFIG) -> list[str]:
        latitude, longitude = find_lat_lon_columns(
            records.columns, map_config.latitude_candidates, map_config.longitude_candidates
        )
        return factor_columns(
            records,
            latitude,
            longitude,
            map_config.color_by_column,
            map_config.excluded_columns,
        )

    def select(self, size_column: str | None, color_column: str | None) -> None:
        """Change both selections at once, triggering a single rebuild."""
        self.param.update(size_column=size_column or None, color_column=color_column or None)

    @param.depends("records", "color_column", "size_column", watch=True)
    def rebuild(self) -> None:
        """Rebuild the render pass for the current selection."""
        if self.records is None or self.records.empty:
            return
        try:
            new_pass = RenderPass.build(
                self.records,
                color_column=self.color_column,
                size_column=self.size_column,
                config=self.map_config,
            )
        except ScaleError as exc:
            logger.warning(f"Render pass failed, keeping previous render: {exc}")
            self.last_error = str(exc)
            return

        self.last_error = ""
        self.render_pass = new_pass
