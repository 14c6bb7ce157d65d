"""
Tracking and counting engine.
"""

from .counter import EventSink, LineCrossingCounter, create_counter_from_config

__all__ = ["EventSink", "LineCrossingCounter", "create_counter_from_config"]
