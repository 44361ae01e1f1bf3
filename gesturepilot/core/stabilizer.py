"""
GesturePilot Temporal Stabilization Layer (The Anchor).
Optimized for high-frequency calling.

Every gesture owns one channel. Each processed frame runs it through:

    1. History    - bounded FIFO of raw detections
    2. Vote       - consistency ratio over the most recent entries
    3. Smoother   - exponential approach toward 1.0 / 0.0, cut at 0.5
    4. Latch      - N consecutive frames to switch on, M to switch off

Nothing here is shared between channels or between stabilizer instances.
"""

from collections import deque
from typing import Any, Dict, Iterable, Optional

import numpy as np

from gesturepilot.config import ALL_GESTURES, CONFIG, GESTURE_PROFILES


class GestureLatch:
    """Hysteresis gate: ignores streaks shorter than its frame counts."""
    __slots__ = ['active', 'on_frames', 'off_frames', 'active_streak', 'inactive_streak']

    def __init__(self, on_frames: int, off_frames: int):
        self.active = False
        self.on_frames = int(on_frames)
        self.off_frames = int(off_frames)
        self.active_streak = 0
        self.inactive_streak = 0

    def update(self, condition: bool) -> bool:
        if condition:
            self.active_streak += 1
            self.inactive_streak = 0
            if not self.active and self.active_streak >= self.on_frames:
                self.active = True
        else:
            self.inactive_streak += 1
            self.active_streak = 0
            if self.active and self.inactive_streak >= self.off_frames:
                self.active = False
        return self.active

    def reset(self):
        self.active = False
        self.active_streak = 0
        self.inactive_streak = 0


class GestureSmoother:
    __slots__ = ['value', 'target', 'factor', 'primed']

    def __init__(self, factor: float):
        self.value = 0.0
        self.target = 0.0
        self.factor = float(factor)
        self.primed = False

    def update(self, target: float) -> float:
        self.target = target
        if not self.primed:
            # First sample: adopt it instead of crawling in from 0.
            self.value = target
            self.primed = True
        else:
            self.value += (target - self.value) * self.factor
        return self.value

    def reset(self):
        self.value = 0.0
        self.target = 0.0
        self.primed = False


class GestureHistory:
    def __init__(self, size: int):
        self.entries = deque(maxlen=size)

    def push(self, detected: bool):
        self.entries.append(1 if detected else 0)

    def consistency(self, window: int) -> float:
        """Fraction of positives among the last `window` entries."""
        if not self.entries:
            return 0.0
        recent = list(self.entries)[-window:]
        return float(np.mean(recent))

    def clear(self):
        self.entries.clear()


class GestureChannel:
    def __init__(self, profile: Dict[str, Any], history_size: int, window: int, cut: float):
        self.history = GestureHistory(history_size)
        self.smoother = GestureSmoother(profile["smoothing"])
        self.latch = GestureLatch(profile["on_frames"], profile["off_frames"])
        self.consistency_threshold = float(profile["consistency"])
        self.window = window
        self.cut = cut

    def update(self, detected: bool) -> bool:
        self.history.push(detected)
        consistent = self.history.consistency(self.window) >= self.consistency_threshold
        smoothed = self.smoother.update(1.0 if consistent else 0.0) >= self.cut
        return self.latch.update(smoothed)

    def reset(self):
        self.history.clear()
        self.smoother.reset()
        self.latch.reset()

    @property
    def active(self) -> bool:
        return self.latch.active


class TemporalStabilizer:
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        cfg = config or CONFIG
        profiles = cfg.get("GESTURE_PROFILES", GESTURE_PROFILES)
        self.channels: Dict[str, GestureChannel] = {
            name: GestureChannel(
                profiles[name],
                history_size=cfg["HISTORY_SIZE"],
                window=cfg["CONSISTENCY_WINDOW"],
                cut=cfg["SMOOTHER_THRESHOLD"],
            )
            for name in ALL_GESTURES
        }

    def update(self, detections: Dict[str, bool], names: Optional[Iterable[str]] = None) -> Dict[str, bool]:
        """
        Feeds one frame of raw detections. Gestures missing from `detections`
        are fed False. Returns the stable flag of every channel.
        """
        for name in (names if names is not None else self.channels):
            self.channels[name].update(bool(detections.get(name, False)))
        return self.states()

    def decay(self, names: Iterable[str]) -> Dict[str, bool]:
        """Force-feeds False through the full chain (hand or face lost)."""
        return self.update({}, names=list(names))

    def states(self) -> Dict[str, bool]:
        return {name: ch.active for name, ch in self.channels.items()}

    def reset(self):
        for ch in self.channels.values():
            ch.reset()

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        return {
            name: {
                "active": ch.latch.active,
                "active_streak": ch.latch.active_streak,
                "inactive_streak": ch.latch.inactive_streak,
                "smoothed": round(ch.smoother.value, 4),
                "consistency": round(ch.history.consistency(ch.window), 4),
            }
            for name, ch in self.channels.items()
        }
