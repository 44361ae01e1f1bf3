"""
GesturePilot Scene Dispatcher (The Actuator).
=============================================

Decouples the high-level intent ("start drawing here") from whatever
scene consumes it.

Features:
- **Ordered:** Actions reach the scene in exactly the order they were issued.
- **Tolerant:** A scene may lack any action; missing ones are skipped.
- **Observable:** The most recent actions are kept for the debug snapshot.
"""

import logging
from collections import deque
from typing import Any, Callable, Iterable, List, Optional, Tuple

from gesturepilot.core.interfaces import IInteractiveScene
from gesturepilot.core.types import Point2D

logger = logging.getLogger(__name__)


class SceneDispatcher:
    def __init__(self, scene: Any, log_size: int = 32,
                 listener: Optional[Callable[[str, Tuple[Any, ...]], None]] = None):
        self.scene = scene
        self.log = deque(maxlen=log_size)
        self.listener = listener

    def call(self, action: str, *args: Any) -> Any:
        """
        Invokes `action` on the scene and returns its result.
        Scene exceptions propagate to the tick caller.
        """
        self.log.append((action, args))
        if self.listener is not None:
            self.listener(action, args)
        method = getattr(self.scene, action, None)
        if method is None:
            logger.debug("Scene ignores action '%s'", action)
            return None
        logger.debug("-> %s%s", action, args)
        return method(*args)

    def recent(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        return list(self.log)


# =============================================================================
# HEADLESS BACKEND (Testing / Session Replay)
# =============================================================================
class HeadlessScene(IInteractiveScene):
    """
    Minimal in-memory scene. Logs every action instead of rendering it,
    but keeps just enough state (a component angle, a palette) for the
    controller's return-value contracts to be meaningful.
    """
    def __init__(self, palette: Optional[Iterable[Tuple[float, float, float]]] = None):
        self.palette = list(palette or [])   # (x, y, radius) hit circles
        self.component_angle = 0.0
        self.selected: Optional[str] = None
        self._next_id = 0

    def _new_handle(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    # --- MANIPULATION ---
    def select(self, point):
        self.selected = self._new_handle("component")
        logger.info("[HEADLESS] Select %s at (%.0f, %.0f)", self.selected, point.x, point.y)
        return self.selected

    def drag(self, handle, point): pass

    def drop(self, handle):
        logger.info("[HEADLESS] Drop %s", handle)
        self.selected = None

    # --- ROTATION ---
    def rotate_start(self, handle, point, angle):
        return {"componentAngle": self.component_angle}

    def get_current_angle(self, handle):
        return {"angle": self.component_angle}

    def rotate(self, handle, angle, delta):
        self.component_angle = angle

    def rotate_end(self, handle):
        logger.info("[HEADLESS] Rotate end at %.1f°", self.component_angle)

    def adjust_trajectory(self, angle, index_distance, point): pass

    # --- SLINGSHOT ---
    def start_slingshot(self, point, distance, angle):
        logger.info("[HEADLESS] Slingshot armed")
        return self._new_handle("slingshot")

    def update_slingshot(self, point, distance, angle): pass

    def release_slingshot(self, handle):
        logger.info("[HEADLESS] Slingshot %s released", handle)

    # --- WHITEBOARD ---
    def start_drawing(self, point): logger.info("[HEADLESS] Draw start")
    def continue_drawing(self, point): pass
    def end_drawing(self): logger.info("[HEADLESS] Draw end")
    def start_erasing(self, point): logger.info("[HEADLESS] Erase start")
    def continue_erasing(self, point): pass
    def end_erasing(self): logger.info("[HEADLESS] Erase end")

    def is_pointer_in_palette(self, point: Point2D) -> bool:
        return any((point.x - x) ** 2 + (point.y - y) ** 2 <= r ** 2 for x, y, r in self.palette)

    def attempt_color_pick(self, point): logger.info("[HEADLESS] Color pick")
    def clear_board(self): logger.info("[HEADLESS] Board cleared")

    # --- LAB ---
    def evaluate(self, requested): logger.info("[HEADLESS] Evaluate circuit")
    def toggle_switch(self): logger.info("[HEADLESS] Switch toggled")
    def request_assistance(self): logger.info("[HEADLESS] Assistance requested")
