"""Render passes, reactive map state and error types."""
