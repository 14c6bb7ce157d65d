"""
Pipeline module for the line counter.

The pipeline orchestrates the processing flow:
- Frame acquisition from observation sources
- Rectangles from a detector or a recorded detection log
- Tracking and counting (via LineCrossingCounter)
- Shared state updates for the status API
"""

from .engine import PipelineEngine, PipelineConfig, PipelineStats, create_engine_from_config

__all__ = [
    "PipelineEngine",
    "PipelineConfig",
    "PipelineStats",
    "create_engine_from_config",
]
