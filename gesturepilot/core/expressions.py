"""GesturePilot Face Expression Rules (Lab variant)."""
from typing import Any, Dict, Optional, Sequence

import numpy as np

from gesturepilot.config import CONFIG
from gesturepilot.hand_utils import has_point, to_point_array

# Face mesh indices
LEFT_EYE_TOP, LEFT_EYE_BOTTOM = 159, 145
RIGHT_EYE_TOP, RIGHT_EYE_BOTTOM = 386, 374
MOUTH_LEFT, MOUTH_RIGHT = 61, 291
LIP_TOP, LIP_BOTTOM = 13, 14
LEFT_BROW, RIGHT_BROW = 70, 105


class FaceGeometry:
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.cfg = config or CONFIG

    def _is_wink(self, face: np.ndarray) -> bool:
        if not has_point(face, LEFT_EYE_TOP, LEFT_EYE_BOTTOM, RIGHT_EYE_TOP, RIGHT_EYE_BOTTOM):
            return False
        left = abs(face[LEFT_EYE_TOP, 1] - face[LEFT_EYE_BOTTOM, 1])
        right = abs(face[RIGHT_EYE_TOP, 1] - face[RIGHT_EYE_BOTTOM, 1])
        wider, narrower = max(left, right), min(left, right)
        # One eye squeezed well below the other, but neither fully shut
        if narrower <= self.cfg["EYE_OPEN_MIN"]:
            return False
        return bool(narrower / wider < self.cfg["WINK_EYE_RATIO"])

    def _is_smile(self, face: np.ndarray) -> bool:
        if not has_point(face, MOUTH_LEFT, MOUTH_RIGHT, LIP_TOP, LIP_BOTTOM):
            return False
        width = abs(face[MOUTH_LEFT, 0] - face[MOUTH_RIGHT, 0])
        height = abs(face[LIP_TOP, 1] - face[LIP_BOTTOM, 1])
        if height <= self.cfg["MOUTH_OPEN_MIN"]:
            return False
        return bool(width / height > self.cfg["SMILE_RATIO"])

    def _is_frown(self, face: np.ndarray) -> bool:
        if not has_point(face, LEFT_BROW, RIGHT_BROW, LEFT_EYE_TOP, RIGHT_EYE_TOP):
            return False
        brow_delta = abs(face[LEFT_BROW, 1] - face[RIGHT_BROW, 1])
        brow_height = (abs(face[LEFT_BROW, 1] - face[LEFT_EYE_TOP, 1])
                       + abs(face[RIGHT_BROW, 1] - face[RIGHT_EYE_TOP, 1])) / 2
        return bool(brow_delta < self.cfg["FROWN_BROW_DELTA"] and brow_height > self.cfg["FROWN_BROW_HEIGHT"])

    def extract(self, landmarks: Optional[Sequence[Any]]) -> Dict[str, bool]:
        """Raw per-frame expression flags. No face means every flag is False."""
        if not landmarks:
            return {"wink": False, "smile": False, "frown": False}
        face = to_point_array(landmarks, max(self.cfg["FACE_LANDMARK_COUNT"], len(landmarks)))
        return {
            "wink": self._is_wink(face),
            "smile": self._is_smile(face),
            "frown": self._is_frown(face),
        }
