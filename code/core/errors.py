"""Exceptions raised by the scales and the cluster aggregator."""


class ScaleError(Exception):
    """Base class for scale construction and lookup failures."""


class ConfigurationError(ScaleError, ValueError):
    """A scale or palette could not be built from the given inputs."""


class UnknownCategoryError(ScaleError, KeyError):
    """A categorical scale was queried with a category it never saw."""

    def __init__(self, category):
        self.category = category
        super().__init__(category)

    def __str__(self) -> str:
        return f"Unknown category: {self.category!r}"
