"""
GesturePilot Vision Adapter.
Converts MediaPipe Tasks results into a LandmarkFrame.

Works on anything shaped like the MediaPipe result objects, so recorded
or synthetic results convert the same way as live ones.
"""
from typing import Any, Optional

from gesturepilot.core.types import LandmarkFrame


def _first(groups: Any) -> Optional[list]:
    if not groups:
        return None
    first = groups[0]
    return list(first) if first else None


def frame_from_results(gesture_result: Any, face_result: Any = None, timestamp: float = 0.0) -> LandmarkFrame:
    """
    Args:
        gesture_result: GestureRecognizerResult (`hand_landmarks`, `gestures`).
        face_result: FaceLandmarkerResult (`face_landmarks`) or None.
        timestamp: Media timestamp in seconds.
    """
    hands = getattr(gesture_result, "hand_landmarks", None) or getattr(gesture_result, "landmarks", None)
    hand = _first(hands)

    categories = ()
    ranked = _first(getattr(gesture_result, "gestures", None))
    if hand is not None and ranked:
        categories = tuple(
            (c.category_name, float(c.score or 0.0))
            for c in ranked
            if getattr(c, "category_name", None)
        )

    face = _first(getattr(face_result, "face_landmarks", None)) if face_result is not None else None
    return LandmarkFrame(timestamp=timestamp, hand=hand, categories=categories, face=face)
