"""
GesturePilot Hand Geometry (The Referee).
Pure landmark -> GeometricSignals extraction. No state survives a frame.

Every test is a ratio against the wrist so it is invariant to how far the
hand is from the camera. All ratios come from the configuration.
"""
import math
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from gesturepilot.config import CONFIG
from gesturepilot.core.types import GeometricSignals, Point2D
from gesturepilot.hand_utils import (
    DIGITS, INDEX_MCP, INDEX_PIP, INDEX_TIP, THUMB_MCP, THUMB_TIP, WRIST,
    has_point, planar_distance, to_point_array,
)


class HandGeometry:
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.cfg = config or CONFIG

    # --- FINGER PRIMITIVES ---
    def extension_ratio(self, lm: np.ndarray, tip: int, joint: int) -> Optional[float]:
        """
        Tip-to-wrist distance over joint-to-wrist distance.
        > 1 means the finger reaches past its joint (extended),
        < 1 means the tip folded back toward the palm (retracted).
        """
        if not has_point(lm, WRIST, tip, joint):
            return None
        joint_dist = planar_distance(lm, joint, WRIST)
        if joint_dist <= 0.0:
            return None
        return planar_distance(lm, tip, WRIST) / joint_dist

    def digit_ratios(self, lm: np.ndarray) -> Dict[str, Optional[float]]:
        return {name: self.extension_ratio(lm, tip, joint) for name, (tip, joint) in DIGITS.items()}

    def count_closed(self, ratios: Dict[str, Optional[float]]) -> int:
        limit = self.cfg["FIST_CLOSED_RATIO"]
        return sum(1 for r in ratios.values() if r is not None and r < limit)

    def count_open(self, ratios: Dict[str, Optional[float]]) -> int:
        limit = self.cfg["OPEN_EXTENSION_RATIO"]
        return sum(1 for r in ratios.values() if r is not None and r > limit)

    def is_index_straight(self, lm: np.ndarray) -> bool:
        """Dot-product alignment of the MCP->PIP and PIP->TIP segments."""
        if not has_point(lm, INDEX_MCP, INDEX_PIP, INDEX_TIP):
            return False
        a = lm[INDEX_PIP, :2] - lm[INDEX_MCP, :2]
        b = lm[INDEX_TIP, :2] - lm[INDEX_PIP, :2]
        norm = float(np.linalg.norm(a) * np.linalg.norm(b))
        if norm == 0.0:
            return False
        return float(np.dot(a, b)) / norm > self.cfg["INDEX_STRAIGHT_COS"]

    # --- PINCH ---
    def check_pinch(self, lm: np.ndarray) -> Tuple[bool, Optional[float], Optional[Point2D]]:
        """
        Returns (is_pinch, tip_distance, midpoint).

        Close tips are not enough: both fingers must point toward each other,
        otherwise a fist with the thumb resting on the index registers too.
        """
        if not has_point(lm, THUMB_TIP, INDEX_TIP):
            return False, None, None

        thumb_tip = lm[THUMB_TIP, :2]
        index_tip = lm[INDEX_TIP, :2]
        tip_dist = planar_distance(lm, THUMB_TIP, INDEX_TIP)
        midpoint = Point2D(float((thumb_tip[0] + index_tip[0]) / 2), float((thumb_tip[1] + index_tip[1]) / 2))

        if not has_point(lm, WRIST, THUMB_MCP, INDEX_PIP):
            return False, tip_dist, midpoint

        reach = max(planar_distance(lm, THUMB_TIP, WRIST), planar_distance(lm, INDEX_TIP, WRIST))
        threshold = max(self.cfg["PINCH_FLOOR"], self.cfg["PINCH_HAND_FRACTION"] * reach)
        if tip_dist >= threshold:
            return False, tip_dist, midpoint

        # Tips touching exactly: direction is undefined, the distance test decides.
        if tip_dist < 1e-9:
            return True, tip_dist, midpoint

        between = index_tip - thumb_tip
        thumb_dir = thumb_tip - lm[THUMB_MCP, :2]
        index_dir = index_tip - lm[INDEX_PIP, :2]
        facing = float(np.dot(thumb_dir, between)) > 0 and float(np.dot(index_dir, -between)) > 0
        return facing, tip_dist, midpoint

    # --- MAIN ENTRY ---
    def extract(self, landmarks: Optional[Sequence[Any]]) -> Optional[GeometricSignals]:
        """
        Pipeline: Matrix -> Digit Ratios -> Pinch -> Fist/Open -> Pointer.
        Returns None when the frame carries no hand at all.
        """
        if not landmarks:
            return None

        lm = to_point_array(landmarks, self.cfg["HAND_LANDMARK_COUNT"])
        ratios = self.digit_ratios(lm)

        is_pinch, pinch_dist, pinch_pos = self.check_pinch(lm)
        closed = self.count_closed(ratios)
        opened = self.count_open(ratios)

        index_ratio = ratios["index"]
        index_extended = index_ratio is not None and index_ratio > self.cfg["POINTER_EXTENSION_RATIO"]

        retract = self.cfg["POINTER_RETRACT_RATIO"]
        others = [ratios["middle"], ratios["ring"], ratios["pinky"]]
        others_retracted = all(r is not None and r < retract for r in others)

        thumb_ratio = ratios["thumb"]
        thumb_ok = thumb_ratio is not None and thumb_ratio < self.cfg["THUMB_OK_RATIO"]

        angle = None
        index_distance = None
        if has_point(lm, WRIST, INDEX_TIP):
            d = lm[INDEX_TIP, :2] - lm[WRIST, :2]
            angle = math.degrees(math.atan2(d[1], d[0]))
            index_distance = planar_distance(lm, INDEX_TIP, WRIST)

        return GeometricSignals(
            index_extended=index_extended,
            others_retracted=others_retracted,
            thumb_ok=thumb_ok,
            index_straight=self.is_index_straight(lm),
            is_pinch_geometric=is_pinch,
            is_fist_geometric=closed >= self.cfg["FIST_MIN_CLOSED"],
            is_open_hand_geometric=(
                opened >= self.cfg["OPEN_MIN_FINGERS"]
                and closed <= self.cfg["OPEN_MAX_CLOSED"]
                and not is_pinch
            ),
            pointing_angle_raw=angle,
            pinch_position=pinch_pos,
            pinch_distance=pinch_dist,
            index_distance=index_distance,
        )
