"""
Field Engine Errors

Raised synchronously by the grid and wave engines. The engine state is
left unchanged whenever one of these is raised.
"""


class FieldError(Exception):
    """Base class for all field engine errors."""


class InvalidDimension(FieldError, ValueError):
    """Grid width/height (cols/rows) was not a positive integer."""


class InvalidThreshold(FieldError, ValueError):
    """Classification threshold was not a finite number."""


class NotInitialized(FieldError, RuntimeError):
    """Operation called before initialize()."""


class OutOfBounds(FieldError, IndexError):
    """Coordinate outside the field on a strict-bounds operation."""
