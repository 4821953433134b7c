"""
Configuration module for the sample map.

Submodules:
    - models: Configuration dataclasses (MapConfig, ClusterGlyphConfig)
"""

from .models import DEFAULT_CONFIG, ClusterGlyphConfig, MapConfig

__all__ = [
    "ClusterGlyphConfig",
    "DEFAULT_CONFIG",
    "MapConfig",
]
