"""
GesturePilot Cognition Engine (The Brain).
==========================================

Maps raw vision output to a stable GestureSet, once per processed frame.
It implements the same "Hybrid Architecture" as a learned classifier plus
a geometric referee:

1. **Classifier scores:** Probabilistic categories from the vision model
   (Open_Palm, Closed_Fist, Pointing_Up).
2. **The Referee (Geometric Rules):** Ratio tests on the 21 landmarks.

A gesture is accepted if the geometry fires with at least a faint
classifier vote, OR the classifier alone is confident. Geometry covers for
a weak or silent classifier and vice versa. Overlaps are resolved by a
fixed priority: pinch > fist > openHand > pointer.

Then every gesture flows through the Temporal Stabilizer, while the wrist
and the pointing angle go through their own filters.
"""

import logging
from typing import Any, Dict, Optional

from gesturepilot.config import FACE_GESTURES, build_config
from gesturepilot.control.pointer_engine import PointerFilter
from gesturepilot.core.angles import AngleFilter
from gesturepilot.core.expressions import FaceGeometry
from gesturepilot.core.kinematics import HandGeometry
from gesturepilot.core.stabilizer import TemporalStabilizer
from gesturepilot.core.types import GeometricSignals, GestureSet, LandmarkFrame, Point2D
from gesturepilot.hand_utils import has_point, to_point_array

logger = logging.getLogger(__name__)


class ScoreFusion:
    """
    The Referee: vets classifier scores against geometry.

    Returns exactly one (or zero) active hand gesture per frame.
    """
    PRIORITY = ("pinch", "fist", "openHand", "pointer")

    def __init__(self, config: Dict[str, Any]):
        self.cfg = config

    def _has_classifier(self, frame: LandmarkFrame) -> bool:
        null = self.cfg["NULL_CATEGORY"]
        return any(name != null for name, _ in frame.categories)

    def _score(self, name: str, frame: LandmarkFrame) -> float:
        return frame.score(self.cfg["CATEGORY_MAP"].get(name, ()))

    def accept(self, name: str, geometric: bool, frame: LandmarkFrame) -> bool:
        score = self._score(name, frame)

        corroborated = (not self._has_classifier(frame)) or score >= self.cfg["CORROBORATE_SCORE"][name]
        confident = score > self.cfg["SOLO_SCORE"][name]

        # A pointing classifier vote is worthless if it also smells like a fist
        if name == "pointer" and confident:
            confident = self._score("fist", frame) < self.cfg["POINTER_MAX_FIST_SCORE"]

        return (geometric and corroborated) or confident

    def fuse(self, signals: GeometricSignals, frame: LandmarkFrame) -> Dict[str, bool]:
        candidates = {
            "pinch": signals.is_pinch_geometric,
            "fist": self.accept("fist", signals.is_fist_geometric, frame),
            "openHand": self.accept("openHand", signals.is_open_hand_geometric, frame),
            "pointer": self.accept("pointer", signals.is_pointer_geometric, frame),
        }
        winner = next((name for name in self.PRIORITY if candidates[name]), None)
        return {name: name == winner for name in self.PRIORITY}


class GesturePipeline:
    """
    The per-frame pipeline: Geometry -> Fusion -> Stabilizer, with the
    pointer and angle filters running alongside.

    Attributes:
        stabilizer (TemporalStabilizer): One vote/smooth/latch chain per gesture.
        pointer (PointerFilter): Wrist -> canvas cursor.
        angle (AngleFilter): Pointing angle smoothing.
        latest (GestureSet): The last snapshot produced.
    """
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.cfg = config or build_config()
        self.geometry = HandGeometry(self.cfg)
        self.faces = FaceGeometry(self.cfg)
        self.fusion = ScoreFusion(self.cfg)
        self.stabilizer = TemporalStabilizer(self.cfg)
        self.pointer = PointerFilter(self.cfg)
        self.angle = AngleFilter(self.cfg)

        self.hand_present = False
        self.last_timestamp: Optional[float] = None
        self.last_raw: Dict[str, bool] = {}
        self.latest = GestureSet()
        self.frames_processed = 0

    @property
    def cursor(self) -> Optional[Point2D]:
        return self.pointer.position if self.hand_present else None

    def _anchor(self, hand) -> Optional[Point2D]:
        lm = to_point_array(hand, self.cfg["HAND_LANDMARK_COUNT"])
        idx = self.cfg["POINTER_LANDMARK"]
        if not has_point(lm, idx):
            return None
        return Point2D(float(lm[idx, 0]), float(lm[idx, 1]))

    def _lose_hand(self):
        if self.hand_present:
            logger.debug("✋ Hand lost")
        self.hand_present = False
        self.pointer.reset()
        self.angle.reset()

    def process(self, frame: Optional[LandmarkFrame]) -> GestureSet:
        """
        Pipeline: Extract -> Fuse -> Stabilize -> Filter -> Snapshot.

        A None frame (or a frame without a hand) is a valid input: it feeds
        False through every channel so the latches decay on schedule.
        """
        if frame is not None and frame.timestamp == self.last_timestamp:
            return self.latest
        if frame is not None:
            self.last_timestamp = frame.timestamp

        raw: Dict[str, bool] = {}
        signals = self.geometry.extract(frame.hand) if frame is not None else None
        anchor = self._anchor(frame.hand) if signals is not None else None

        # 1. HAND
        if signals is None or anchor is None:
            signals = None
            self._lose_hand()
        else:
            self.hand_present = True
            self.pointer.update(anchor.x, anchor.y)
            raw.update(self.fusion.fuse(signals, frame))
            if signals.is_pointer_geometric or signals.is_pinch_geometric:
                self.angle.update(signals.pointing_angle_raw)

        # 2. FACE
        if frame is not None and frame.has_face:
            raw.update(self.faces.extract(frame.face))
        else:
            raw.update({name: False for name in FACE_GESTURES})

        # 3. TEMPORAL SMOOTHING (absent gestures are fed False)
        stable = self.stabilizer.update(raw)
        self.last_raw = raw
        self.frames_processed += 1
        logger.debug("frame raw=%s stable=%s", raw, stable)

        self.latest = GestureSet.from_flags(
            stable,
            hand_present=self.hand_present,
            angle=self.angle.current,
            index_distance=signals.index_distance if signals else None,
            pinch_position=signals.pinch_position if signals else None,
            pinch_distance=signals.pinch_distance if signals else None,
        )
        return self.latest

    def reset(self):
        """Full reset, including calibration (explicit user reset)."""
        self.stabilizer.reset()
        self._lose_hand()
        self.pointer.reset_calibration()
        self.last_timestamp = None
        self.latest = GestureSet()

    def snapshot(self) -> Dict[str, Any]:
        """Read-only debug view. Mutating the result changes nothing."""
        calibration = self.pointer.calibration
        return {
            "frames_processed": self.frames_processed,
            "hand_present": self.hand_present,
            "raw": dict(self.last_raw),
            "gestures": self.latest.active_names(),
            "channels": self.stabilizer.snapshot(),
            "pointer": {
                "ready": self.pointer.ready,
                "x": self.pointer.current_x,
                "y": self.pointer.current_y,
                "calibrated": calibration.calibrated if calibration else None,
            },
            "angle": {
                "ready": self.angle.ready,
                "current": self.angle.current,
                "last_delta": self.angle.last_delta,
            },
        }
