"""
Error types raised by the tracking and counting engine.
"""

from __future__ import annotations


class CountingError(Exception):
    """Base class for counting engine errors."""


class InvalidDetection(CountingError, ValueError):
    """A detection rectangle with non-positive width or height."""


class NoActiveLine(CountingError, ValueError):
    """The counting line is undefined because the frame height is not positive."""
