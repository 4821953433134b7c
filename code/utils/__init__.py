"""Utility functions for the map styling package."""

from .formatting import format_title, format_value, precision_for_range, round_half_up

__all__ = ["format_title", "format_value", "precision_for_range", "round_half_up"]
