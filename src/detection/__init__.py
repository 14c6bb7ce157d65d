"""
Detection interface consumed by the frame loop.
"""

from .base import Detector

__all__ = ["Detector"]
