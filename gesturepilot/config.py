"""
GesturePilot Configuration Management.
======================================

This module defines the tuning space for the gesture pipeline and the
interaction controller. Parameters are organized in the same "Layer Cake"
order the data flows through:

    Geometry Referee -> Score Fusion -> Temporal Stabilizer
    -> Pointer / Angle Physics -> Interaction Timing

! WARNING !
The defaults are tuned for the fixed gesture vocabulary
(openHand, fist, pointer, pinch, wink, smile, frown). Adding a gesture means
re-tuning its profile, not just adding a key.

Never mutate `CONFIG` at runtime. Use `build_config()` to get a private copy.
"""

import copy
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration or variant preset is invalid."""


# --- GESTURE VOCABULARY ---
HAND_GESTURES = ("openHand", "fist", "pointer", "pinch")
FACE_GESTURES = ("wink", "smile", "frown")
ALL_GESTURES = HAND_GESTURES + FACE_GESTURES

# --- MASTER CONFIGURATION ---
CONFIG: Dict[str, Any] = {
    # =========================================================
    # LAYER 1: INPUT SIGNAL
    # =========================================================
    "HAND_LANDMARK_COUNT": 21,      # Points per tracked hand
    "FACE_LANDMARK_COUNT": 468,     # Minimum face mesh size
    "POINTER_LANDMARK": 0,          # Wrist drives the cursor

    # =========================================================
    # LAYER 2: GEOMETRY REFEREE (Ratios vs. Wrist Distance)
    # =========================================================
    "POINTER_EXTENSION_RATIO": 1.2, # Index tip must reach this far past its PIP
    "POINTER_RETRACT_RATIO": 0.95,  # Middle/Ring/Pinky tips must fold inside their PIP
    "THUMB_OK_RATIO": 1.2,          # Thumb must NOT be extended past this for pointer
    "INDEX_STRAIGHT_COS": 0.8,      # Cosine between index segments (MCP->PIP, PIP->TIP)
    "PINCH_FLOOR": 0.03,            # Absolute minimum pinch threshold (normalized)
    "PINCH_HAND_FRACTION": 0.2,     # Adaptive threshold = fraction of tip reach
    "FIST_CLOSED_RATIO": 0.95,      # Tip closer to wrist than PIP x ratio = closed
    "FIST_MIN_CLOSED": 4,           # Closed digits (of 5) for a fist
    "OPEN_EXTENSION_RATIO": 1.2,    # Tip farther than PIP x ratio = open
    "OPEN_MIN_FINGERS": 4,          # Open digits (of 5) for an open hand
    "OPEN_MAX_CLOSED": 1,           # Tolerated closed digits in an open hand

    # --- FACE EXPRESSIONS (Lab variant) ---
    "WINK_EYE_RATIO": 0.4,          # Closed eye gap / open eye gap
    "EYE_OPEN_MIN": 0.01,           # Both eye gaps must exceed this (a shut eye is not a wink)
    "SMILE_RATIO": 1.6,             # Mouth width / mouth height
    "MOUTH_OPEN_MIN": 0.005,        # Ignore a fully closed mouth
    "FROWN_BROW_DELTA": 0.015,      # Brows level within this delta
    "FROWN_BROW_HEIGHT": 0.01,      # Brow-to-eye distance must exceed this

    # =========================================================
    # LAYER 3: SCORE FUSION (Classifier vs. Geometry)
    # =========================================================
    "CATEGORY_MAP": {
        "openHand": ["Open_Palm"],
        "fist": ["Closed_Fist"],
        "pointer": ["Pointing_Up"],
    },
    "CORROBORATE_SCORE": {          # Geometry accepted with at least this score
        "openHand": 0.1,
        "fist": 0.1,
        "pointer": 0.1,
    },
    "SOLO_SCORE": {                 # Classifier alone accepted above this score
        "openHand": 0.55,
        "fist": 0.55,
        "pointer": 0.45,
    },
    "POINTER_MAX_FIST_SCORE": 0.4,  # Classifier-only pointer rejected if fist is this likely
    "NULL_CATEGORY": "None",        # Classifier label meaning "no opinion"

    # =========================================================
    # LAYER 4: TEMPORAL STABILIZER (Vote -> Smooth -> Latch)
    # =========================================================
    "HISTORY_SIZE": 10,             # Raw detections kept per gesture
    "CONSISTENCY_WINDOW": 5,        # Most recent entries used for the vote
    "SMOOTHER_THRESHOLD": 0.5,      # Smoothed value -> boolean cut

    # =========================================================
    # LAYER 5: POINTER PHYSICS
    # =========================================================
    "CANVAS_WIDTH": 1280,
    "CANVAS_HEIGHT": 720,
    "MIRROR_X": True,               # Mirror the camera view
    "CALIBRATION_ENABLED": False,   # Game variants collect a range first
    "CALIBRATION_SAMPLES": 30,      # Warm-up window size
    "CALIBRATION_OVERSCALE": 1.1,   # Stretch about the midpoint after calibration
    "POINTER_HISTORY": 5,           # Median window
    "POINTER_MIN_MOVE_PX": 2.0,     # Below this, hold still (tremor)
    "POINTER_ALPHA_STILL": 0.1,     # Heavy smoothing inside the tremor gate
    "POINTER_ALPHA_MOVE": 0.25,     # Responsive smoothing for intentional motion

    # =========================================================
    # LAYER 6: ANGLE PHYSICS
    # =========================================================
    "ANGLE_HISTORY": 5,
    "ANGLE_MIN_CHANGE": 1.0,        # Degrees. Smaller deltas are jitter.
    "ANGLE_ALPHA": 0.2,

    # =========================================================
    # LAYER 7: INTERACTION TIMING (Seconds)
    # =========================================================
    "VARIANT": "manipulation",
    "EXPRESSIONS_ENABLED": False,   # Face-driven auxiliary actions
    "IDLE_TIMEOUT": 0.12,           # No relevant gesture for this long -> Idle
    "ROTATION_SENSITIVITY": 2.5,    # Hand degrees -> object degrees
    "COLOR_PICK_INTERVAL": 0.25,    # Re-trigger period over the palette
    "CLEAR_HOLD_TIME": 1.8,         # Open hand hold to clear the board
    "ASSIST_COOLDOWN": 5.0,         # Minimum gap between assistance requests
    "ACTION_LOG_SIZE": 32,          # Recent actions kept for the debug snapshot
}

# --- PER-GESTURE PROFILES ---
# on/off: consecutive frames for the latch to flip.
# smoothing: smoother factor (faster for pinch, slower for openHand).
# consistency: vote threshold over the last CONSISTENCY_WINDOW detections.
GESTURE_PROFILES: Dict[str, Dict[str, float]] = {
    "openHand": {"on_frames": 4, "off_frames": 5, "smoothing": 0.2, "consistency": 0.7},
    "fist":     {"on_frames": 3, "off_frames": 4, "smoothing": 0.3, "consistency": 0.7},
    "pointer":  {"on_frames": 4, "off_frames": 4, "smoothing": 0.3, "consistency": 0.55},
    "pinch":    {"on_frames": 3, "off_frames": 4, "smoothing": 0.35, "consistency": 0.7},
    "wink":     {"on_frames": 3, "off_frames": 3, "smoothing": 0.35, "consistency": 0.7},
    "smile":    {"on_frames": 3, "off_frames": 4, "smoothing": 0.3, "consistency": 0.7},
    "frown":    {"on_frames": 8, "off_frames": 5, "smoothing": 0.3, "consistency": 0.7},
}

# --- VARIANT PRESETS ---
# Partial overrides. Each variant used to be a separate copy of the pipeline.
VARIANT_PRESETS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "manipulation": {
        "config": {"VARIANT": "manipulation", "CALIBRATION_ENABLED": True},
        "profiles": {
            "fist": {"on_frames": 4, "off_frames": 6},
            "pinch": {"on_frames": 3, "off_frames": 5},
        },
    },
    "whiteboard": {
        "config": {"VARIANT": "whiteboard"},
        "profiles": {},
    },
    "lab": {
        "config": {"VARIANT": "lab", "EXPRESSIONS_ENABLED": True},
        "profiles": {
            "fist": {"on_frames": 3, "off_frames": 4},
        },
    },
}

_PROFILE_KEYS = ("on_frames", "off_frames", "smoothing", "consistency")


def _merge_profiles(target: Dict[str, Dict[str, Any]], updates: Dict[str, Dict[str, Any]]):
    for name, values in updates.items():
        if name not in target:
            raise ConfigError(f"Unknown gesture profile: {name!r}")
        for key, value in values.items():
            if key not in _PROFILE_KEYS:
                raise ConfigError(f"Unknown profile key {key!r} for gesture {name!r}")
            target[name][key] = value


def _merge_config(target: Dict[str, Any], updates: Dict[str, Any]):
    for key, value in updates.items():
        if key not in target:
            raise ConfigError(f"Unknown configuration key: {key!r}")
        target[key] = copy.deepcopy(value)


def validate_config(cfg: Dict[str, Any]) -> None:
    """Rejects values that would make the pipeline misbehave silently."""
    for name, profile in cfg["GESTURE_PROFILES"].items():
        if int(profile["on_frames"]) < 1 or int(profile["off_frames"]) < 1:
            raise ConfigError(f"{name}: latch frame counts must be >= 1")
        if not 0.0 < float(profile["smoothing"]) <= 1.0:
            raise ConfigError(f"{name}: smoothing must be in (0, 1]")
        if not 0.0 <= float(profile["consistency"]) <= 1.0:
            raise ConfigError(f"{name}: consistency must be in [0, 1]")

    if cfg["CANVAS_WIDTH"] <= 0 or cfg["CANVAS_HEIGHT"] <= 0:
        raise ConfigError("Canvas dimensions must be positive")
    if cfg["CONSISTENCY_WINDOW"] > cfg["HISTORY_SIZE"]:
        raise ConfigError("CONSISTENCY_WINDOW cannot exceed HISTORY_SIZE")
    for key in ("POINTER_ALPHA_STILL", "POINTER_ALPHA_MOVE", "ANGLE_ALPHA"):
        if not 0.0 < cfg[key] <= 1.0:
            raise ConfigError(f"{key} must be in (0, 1]")


def build_config(variant: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None,
                 profiles: Optional[Dict[str, Dict[str, Any]]] = None) -> Dict[str, Any]:
    """
    Returns a private, validated configuration for one pipeline instance.

    Args:
        variant: "manipulation", "whiteboard" or "lab". Defaults to CONFIG["VARIANT"].
        overrides: Top-level CONFIG keys to replace.
        profiles: Per-gesture profile fields to replace, e.g. {"pinch": {"on_frames": 2}}.
    """
    variant = variant or CONFIG["VARIANT"]
    if variant not in VARIANT_PRESETS:
        raise ConfigError(f"Unknown variant: {variant!r} (expected one of {sorted(VARIANT_PRESETS)})")

    cfg = copy.deepcopy(CONFIG)
    cfg["GESTURE_PROFILES"] = copy.deepcopy(GESTURE_PROFILES)

    preset = VARIANT_PRESETS[variant]
    _merge_config(cfg, preset.get("config", {}))
    _merge_profiles(cfg["GESTURE_PROFILES"], preset.get("profiles", {}))

    if overrides:
        _merge_config(cfg, overrides)
    if profiles:
        _merge_profiles(cfg["GESTURE_PROFILES"], profiles)

    validate_config(cfg)
    logger.debug("Built '%s' configuration", variant)
    return cfg
