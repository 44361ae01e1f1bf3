"""
GesturePilot MediaPipe Source.
Wraps the MediaPipe Tasks gesture recognizer (and optionally the face
landmarker) behind IVisionModel. Requires the `vision` extra.
"""
import logging
import os
from typing import Any, Optional

import mediapipe as mp
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision

from gesturepilot.core.interfaces import IVisionModel
from gesturepilot.core.types import LandmarkFrame
from gesturepilot.vision.adapter import frame_from_results

logger = logging.getLogger(__name__)


class MediaPipeVisionSource(IVisionModel):
    """
    Attributes:
        recognizer (vision.GestureRecognizer): One hand, VIDEO running mode.
        face_landmarker (vision.FaceLandmarker): One face, or None when disabled.
    """
    def __init__(self, gesture_model_path: str, face_model_path: Optional[str] = None):
        if not os.path.exists(gesture_model_path):
            raise FileNotFoundError(f"❌ Gesture model not found at: {gesture_model_path}")

        logger.info("🧠 LOADING GESTURE MODEL: %s", gesture_model_path)
        self.recognizer = vision.GestureRecognizer.create_from_options(
            vision.GestureRecognizerOptions(
                base_options=mp_tasks.BaseOptions(model_asset_path=gesture_model_path),
                running_mode=vision.RunningMode.VIDEO,
                num_hands=1,
            )
        )

        self.face_landmarker = None
        if face_model_path:
            if not os.path.exists(face_model_path):
                raise FileNotFoundError(f"❌ Face model not found at: {face_model_path}")
            logger.info("🙂 LOADING FACE MODEL: %s", face_model_path)
            self.face_landmarker = vision.FaceLandmarker.create_from_options(
                vision.FaceLandmarkerOptions(
                    base_options=mp_tasks.BaseOptions(model_asset_path=face_model_path),
                    running_mode=vision.RunningMode.VIDEO,
                    num_faces=1,
                )
            )

    def recognize(self, frame: Any, timestamp: float) -> LandmarkFrame:
        """`frame` is an RGB ndarray or an mp.Image; `timestamp` is in seconds."""
        image = frame if isinstance(frame, mp.Image) else mp.Image(image_format=mp.ImageFormat.SRGB, data=frame)
        timestamp_ms = int(timestamp * 1000)

        gesture_result = self.recognizer.recognize_for_video(image, timestamp_ms)
        face_result = None
        if self.face_landmarker is not None:
            face_result = self.face_landmarker.detect_for_video(image, timestamp_ms)
        return frame_from_results(gesture_result, face_result, timestamp)

    def close(self):
        self.recognizer.close()
        if self.face_landmarker is not None:
            self.face_landmarker.close()
