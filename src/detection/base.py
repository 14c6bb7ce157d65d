"""
Detection interface.

Detection itself happens outside this project: any backend (cascade
classifier, background subtraction, a neural detector) can drive the
counter as long as it returns boxes in frame pixel coordinates.
"""

from __future__ import annotations

import numpy as np


class Detector:
    """
    Detector interface returning boxes in pixel-space.

    detect() returns an (N, 4+) array of [x, y, w, h, ...] rows. Extra
    columns such as confidence or class id are ignored by the counter.
    """

    def detect(self, frame: np.ndarray) -> np.ndarray:
        raise NotImplementedError
