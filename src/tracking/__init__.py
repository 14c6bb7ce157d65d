"""
Tracking module.

The canonical tracker implementation is in tracking.tracker.
"""

from .tracker import Association, AssociationOutcome, VehicleTracker

__all__ = ["Association", "AssociationOutcome", "VehicleTracker"]
