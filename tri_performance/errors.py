"""Exceptions raised by the engine for bad caller input."""


class FormatError(ValueError):
    """Time text that cannot be parsed or has out-of-range groups."""


class ValidationError(ValueError):
    """Numeric input outside the domain of a calculation, or missing data."""
