"""
GesturePilot Landmark Processing Utilities.
==========================================

Normalizes whatever the vision model hands us into a dense NumPy matrix.

The vision model may give us:
1. MediaPipe landmark objects (`.x`, `.y`, `.z`).
2. Plain dicts ({"x": .., "y": .., "z": ..}) from recorded sessions.
3. Plain [x, y, z] lists.

Missing points (None, short lists) and non-finite coordinates are stored
as NaN rows, so every downstream check can degrade per point instead of
failing the whole frame.
"""

import math
from typing import Any, Optional, Sequence

import numpy as np

# --- HAND TOPOLOGY (MediaPipe indices) ---
WRIST = 0
THUMB_MCP, THUMB_IP, THUMB_TIP = 2, 3, 4
INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
MIDDLE_PIP, MIDDLE_TIP = 10, 12
RING_PIP, RING_TIP = 14, 16
PINKY_PIP, PINKY_TIP = 18, 20

# (tip, proximal joint) per digit. The thumb uses its MCP.
DIGITS = {
    "thumb": (THUMB_TIP, THUMB_MCP),
    "index": (INDEX_TIP, INDEX_PIP),
    "middle": (MIDDLE_TIP, MIDDLE_PIP),
    "ring": (RING_TIP, RING_PIP),
    "pinky": (PINKY_TIP, PINKY_PIP),
}


def _coords_of(point: Any) -> Optional[Sequence[float]]:
    if point is None:
        return None
    if hasattr(point, "x"):
        return (point.x, point.y, getattr(point, "z", 0.0) or 0.0)
    if isinstance(point, dict):
        return (point.get("x"), point.get("y"), point.get("z", 0.0) or 0.0)
    if len(point) >= 2:
        return (point[0], point[1], point[2] if len(point) > 2 else 0.0)
    return None


def to_point_array(landmarks: Optional[Sequence[Any]], size: int) -> np.ndarray:
    """
    Converts a landmark sequence into a (size x 3) float matrix.
    Rows for absent or non-finite points are NaN.
    """
    coords = np.full((size, 3), np.nan, dtype=np.float64)
    if not landmarks:
        return coords

    for i, point in enumerate(landmarks[:size]):
        try:
            raw = _coords_of(point)
            if raw is None:
                continue
            row = np.array(raw, dtype=np.float64)
        except (TypeError, ValueError):
            continue
        if np.all(np.isfinite(row)):
            coords[i] = row
    return coords


def has_point(coords: np.ndarray, *indices: int) -> bool:
    """True when every requested row is a finite point."""
    return all(0 <= i < len(coords) and bool(np.isfinite(coords[i, 0])) for i in indices)


def planar_distance(coords: np.ndarray, a: int, b: int) -> float:
    """Image-plane distance between two landmarks (z is too noisy to use)."""
    d = coords[a, :2] - coords[b, :2]
    return float(math.hypot(d[0], d[1]))


def is_finite_number(value: Any) -> bool:
    try:
        return value is not None and math.isfinite(float(value))
    except (TypeError, ValueError):
        return False
