"""Exceptions raised by the comparison pipeline"""


class MutCompError(Exception):
    pass


class ShapeMismatchError(MutCompError, ValueError):
    """Vectors or sample matrices of inconsistent length/shape."""


class InvalidParameterError(MutCompError, ValueError):
    """Non-positive concentration, simulation size or malformed configuration."""


class InputDataError(MutCompError):
    """Count or reference tables that cannot be loaded as given."""
