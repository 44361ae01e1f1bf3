"""
GesturePilot Coordinate Engine.
===============================

Translates a normalized hand coordinate (0.0 - 1.0) into a stable canvas
pixel.

Key Concept: "Median + Liquid Friction"
1. **Median:** x and y medians over the last few samples (independently,
   not the median point). Kills one-frame outliers without average lag.
2. **Tremor Gate:** When the median barely moved, apply heavy friction so
   the cursor holds still.
3. **Travel:** Otherwise apply light friction so intentional motion tracks.
"""

import logging
import math
from collections import deque
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from gesturepilot.config import CONFIG
from gesturepilot.core.types import Point2D
from gesturepilot.hand_utils import is_finite_number

logger = logging.getLogger(__name__)


class WorkspaceCalibration:
    """
    Learns the range the user's hand actually covers during a warm-up
    window, then stretches that range onto the full canvas.
    """
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        cfg = config or CONFIG
        self.capacity = cfg["CALIBRATION_SAMPLES"]
        self.overscale = cfg["CALIBRATION_OVERSCALE"]
        self.samples: List[Tuple[float, float]] = []
        self.min_x = self.max_x = self.min_y = self.max_y = 0.0
        self.calibrated = False

    def add_sample(self, x: float, y: float) -> bool:
        """Collects one raw sample. Returns True once calibration is frozen."""
        if self.calibrated:
            return True
        self.samples.append((x, y))
        if len(self.samples) >= self.capacity:
            coords = np.array(self.samples)
            self.min_x, self.min_y = (float(v) for v in coords.min(axis=0))
            self.max_x, self.max_y = (float(v) for v in coords.max(axis=0))
            self.calibrated = True
            logger.info("📐 Calibration frozen: x[%.3f, %.3f] y[%.3f, %.3f]",
                        self.min_x, self.max_x, self.min_y, self.max_y)
        return self.calibrated

    def _map_axis(self, value: float, lo: float, hi: float) -> float:
        span = hi - lo
        if span < 1e-6:
            return value
        norm = (value - lo) / span
        return 0.5 + (norm - 0.5) * self.overscale

    def map(self, x: float, y: float) -> Tuple[float, float]:
        """Identity until calibrated."""
        if not self.calibrated:
            return x, y
        return self._map_axis(x, self.min_x, self.max_x), self._map_axis(y, self.min_y, self.max_y)

    def reset(self):
        self.samples.clear()
        self.calibrated = False


class PointerFilter:
    """
    Manages pointer positioning, coordinate transformation, and smoothing.
    """
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        cfg = config or CONFIG
        self.width = float(cfg["CANVAS_WIDTH"])
        self.height = float(cfg["CANVAS_HEIGHT"])
        self.mirror = cfg["MIRROR_X"]
        self.min_move = cfg["POINTER_MIN_MOVE_PX"]
        self.alpha_still = cfg["POINTER_ALPHA_STILL"]
        self.alpha_move = cfg["POINTER_ALPHA_MOVE"]

        self.calibration = WorkspaceCalibration(cfg) if cfg["CALIBRATION_ENABLED"] else None
        self.history = deque(maxlen=cfg["POINTER_HISTORY"])

        # State
        self.current_x = 0.0
        self.current_y = 0.0
        self.ready = False

    @property
    def position(self) -> Optional[Point2D]:
        return Point2D(self.current_x, self.current_y) if self.ready else None

    def get_canvas_coordinates(self, raw_x: float, raw_y: float) -> Tuple[float, float]:
        """Normalized camera coordinates -> (mirrored) canvas pixels, unclamped."""
        if self.calibration is not None:
            if not self.calibration.calibrated:
                self.calibration.add_sample(raw_x, raw_y)
            raw_x, raw_y = self.calibration.map(raw_x, raw_y)

        px = raw_x * self.width
        py = raw_y * self.height
        if self.mirror:
            px = self.width - px
        return px, py

    def _clamp(self, x: float, y: float) -> Tuple[float, float]:
        return float(np.clip(x, 0.0, self.width)), float(np.clip(y, 0.0, self.height))

    def update(self, raw_x: Any, raw_y: Any) -> Optional[Point2D]:
        """
        Main entry point. Returns the filtered pointer, or None when no
        valid sample has been seen since the last reset.
        """
        if not (is_finite_number(raw_x) and is_finite_number(raw_y)):
            return self.position

        tx, ty = self.get_canvas_coordinates(float(raw_x), float(raw_y))

        # 1. RE-ANCHOR (first sample after a reset)
        if not self.ready:
            self.history.clear()
            self.history.append((tx, ty))
            self.current_x, self.current_y = self._clamp(tx, ty)
            self.ready = True
            return self.position

        # 2. MEDIAN (per axis)
        self.history.append((tx, ty))
        samples = np.array(self.history)
        med_x = float(np.median(samples[:, 0]))
        med_y = float(np.median(samples[:, 1]))

        # 3. TREMOR GATE
        moved = math.hypot(med_x - self.current_x, med_y - self.current_y)
        alpha = self.alpha_still if moved < self.min_move else self.alpha_move

        # 4. APPLY FILTER
        nx = self.current_x + (med_x - self.current_x) * alpha
        ny = self.current_y + (med_y - self.current_y) * alpha
        self.current_x, self.current_y = self._clamp(nx, ny)
        return self.position

    def reset(self):
        """Resets the filter (e.g., after track loss). Calibration survives."""
        self.ready = False
        self.history.clear()

    def reset_calibration(self):
        if self.calibration is not None:
            self.calibration.reset()
