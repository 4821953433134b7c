"""
Size scale for map markers.

Handles numeric-based radius mapping with optional gamma correction.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np
import pandas as pd

from core.errors import ConfigurationError

from .color_mapping import to_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContinuousSizeScale:
    """
    Maps numeric values linearly onto a pixel radius range.

    Values outside [data_min, data_max] are clamped. A gamma other than 1.0
    bends the curve (>1 emphasizes large values, <1 emphasizes small ones).
    """

    data_min: float
    data_max: float
    size_min: float = 4.0
    size_max: float = 22.0
    gamma: float = 1.0

    def __post_init__(self):
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
        if self.size_min > self.size_max:
            raise ConfigurationError(
                f"size_min ({self.size_min}) must not exceed size_max ({self.size_max})"
            )
        if self.gamma <= 0:
            raise ConfigurationError(f"gamma must be positive, got {self.gamma}")

    @classmethod
    def from_values(
        cls,
        values: Iterable[Any],
        size_min: float = 4.0,
        size_max: float = 22.0,
        gamma: float = 1.0,
    ) -> "ContinuousSizeScale":
        """
        Build a scale spanning the observed numeric range of values.

        Raises:
            ConfigurationError: If no numeric value is present
        """
        numeric = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce").dropna()
        if numeric.empty:
            raise ConfigurationError("Cannot build a size scale without numeric values")

        scale = cls(
            data_min=float(numeric.min()),
            data_max=float(numeric.max()),
            size_min=size_min,
            size_max=size_max,
            gamma=gamma,
        )
        logger.debug(
            f"Size scale [{scale.data_min}, {scale.data_max}] -> "
            f"[{scale.size_min}, {scale.size_max}] px"
        )
        return scale

    @property
    def is_degenerate(self) -> bool:
        return self.data_min == self.data_max

    @property
    def default_radius(self) -> float:
        """Radius for markers whose size value is missing."""
        return (self.size_min + self.size_max) / 2

    def radius_of(self, value: float) -> float:
        """
        Get the radius for a numeric value.

        Callers substitute default_radius for missing values before calling.
        """
        value = float(value)

        if self.is_degenerate:
            if value == self.data_max:
                return self.default_radius
            if value < self.data_min:
                return float(self.size_min)
            return float(self.size_max)

        clamped = max(self.data_min, min(self.data_max, value))
        t = (clamped - self.data_min) / (self.data_max - self.data_min)
        if self.gamma != 1.0:
            t = t**self.gamma
        return self.size_min + t * (self.size_max - self.size_min)

    def radii_of(self, values: Iterable[Any]) -> np.ndarray:
        """
        Vectorized radius_of for a whole column.

        Missing and non-numeric values get default_radius.

        Returns:
            NumPy array of radii, one per input value
        """
        numeric = pd.to_numeric(
            pd.Series(list(values), dtype=object), errors="coerce"
        ).to_numpy(dtype=float)

        if self.is_degenerate:
            sizes = np.where(
                numeric < self.data_min,
                self.size_min,
                np.where(numeric > self.data_max, self.size_max, self.default_radius),
            )
        else:
            normalized = np.clip((numeric - self.data_min) / (self.data_max - self.data_min), 0, 1)
            gamma_corrected = np.power(normalized, self.gamma)
            sizes = self.size_min + gamma_corrected * (self.size_max - self.size_min)

        sizes = np.where(np.isnan(numeric), self.default_radius, sizes)
        return sizes.astype(float)
