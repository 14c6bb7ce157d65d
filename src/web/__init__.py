"""
Read-only status API for the line counter.
"""

from .app import create_app
from .state import SharedState

__all__ = ["create_app", "SharedState"]
