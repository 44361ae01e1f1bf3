"""
GesturePilot Angle Physics.
===========================

Angles live on a circle: 179 and -179 are 2 degrees apart, not 358.
Everything here works with wrap-safe deltas in (-180, 180].
"""
import math
from collections import deque
from typing import Any, Dict, Optional

import numpy as np

from gesturepilot.config import CONFIG
from gesturepilot.hand_utils import is_finite_number


def normalize_angle(angle: float) -> float:
    """Maps any angle in degrees into (-180, 180]."""
    a = math.fmod(angle, 360.0)
    if a <= -180.0:
        a += 360.0
    elif a > 180.0:
        a -= 360.0
    return a


def shortest_delta(start: float, end: float) -> float:
    """Signed shortest rotation from `start` to `end`, in (-180, 180]."""
    return normalize_angle(end - start)


def wrap_360(angle: float) -> float:
    """Maps any angle in degrees into [0, 360)."""
    a = math.fmod(angle, 360.0)
    if a < 0:
        a += 360.0
    return 0.0 if a >= 360.0 else a


class AngleFilter:
    """
    Median + exponential smoothing for a pointing angle.

    1. Jitter gate: deltas under ANGLE_MIN_CHANGE keep the current value.
    2. Median: taken over offsets relative to the current angle, so a window
       straddling +-180 does not average out to 0.
    3. EMA: move a fraction of the way toward that median.
    """
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        cfg = config or CONFIG
        self.alpha = cfg["ANGLE_ALPHA"]
        self.min_change = cfg["ANGLE_MIN_CHANGE"]
        self.history = deque(maxlen=cfg["ANGLE_HISTORY"])
        self.current = 0.0
        self.ready = False
        self.last_delta = 0.0

    def update(self, raw_angle: Any) -> float:
        if not is_finite_number(raw_angle):
            return self.current

        angle = normalize_angle(float(raw_angle))

        if not self.ready:
            self.history.clear()
            self.history.append(angle)
            self.current = angle
            self.ready = True
            self.last_delta = 0.0
            return self.current

        delta = shortest_delta(self.current, angle)
        self.last_delta = delta
        if abs(delta) < self.min_change:
            return self.current

        self.history.append(angle)
        offsets = [shortest_delta(self.current, h) for h in self.history]
        step = float(np.median(offsets))
        self.current = normalize_angle(self.current + self.alpha * step)
        return self.current

    def reset(self):
        """Next sample re-anchors instead of easing in from stale state."""
        self.ready = False
        self.history.clear()
        self.last_delta = 0.0
