"""
GesturePilot Controller.
Acts as the central nervous system: one call per application tick turns
the stabilized GestureSet into scene actions.
"""

import dataclasses
import logging
import time
from typing import Any, Dict, Optional

from gesturepilot.config import build_config
from gesturepilot.control.handlers import HandlerContext
from gesturepilot.control.handlers.expression_handler import ExpressionHandler
from gesturepilot.control.handlers.manipulation_handler import ManipulationHandler
from gesturepilot.control.handlers.whiteboard_handler import WhiteboardHandler
from gesturepilot.control.scene_dispatcher import HeadlessScene, SceneDispatcher
from gesturepilot.core.state_manager import StateManager
from gesturepilot.core.types import Gesture, GestureSet, InteractionState, Point2D

logger = logging.getLogger(__name__)

# Gestures that keep each non-Idle state alive
RELEVANT_GESTURES = {
    InteractionState.DRAGGING: (Gesture.FIST, Gesture.POINTER, Gesture.PINCH, Gesture.OPEN_HAND),
    InteractionState.ROTATING: (Gesture.POINTER, Gesture.FIST, Gesture.PINCH, Gesture.OPEN_HAND),
    InteractionState.SLINGSHOT: (Gesture.PINCH,),
    InteractionState.DRAWING: (Gesture.POINTER,),
    InteractionState.ERASING: (Gesture.FIST,),
}


class InteractionController:
    def __init__(self, scene: Any = None, config: Optional[Dict[str, Any]] = None, listener=None):
        self.cfg = config or build_config()
        self.state = StateManager()
        self.actions = SceneDispatcher(scene if scene is not None else HeadlessScene(),
                                       log_size=self.cfg["ACTION_LOG_SIZE"],
                                       listener=listener)

        # Handlers
        if self.cfg["VARIANT"] == "whiteboard":
            self.primary_handler = WhiteboardHandler()
        else:
            self.primary_handler = ManipulationHandler()
        self.expression_handler = ExpressionHandler() if self.cfg["EXPRESSIONS_ENABLED"] else None

        self.last_gestures = GestureSet()
        self.last_cursor: Optional[Point2D] = None
        self.ticks = 0

    @property
    def interaction_state(self) -> InteractionState:
        return self.state.state

    def _idle_timeout_expired(self, ctx: HandlerContext) -> bool:
        """
        Debounced exit: a non-Idle state with none of its gestures asserted
        for longer than IDLE_TIMEOUT falls back to Idle, with no "end" action.
        """
        state = self.state
        if state.is_idle:
            state.unasserted_since = None
            return False

        if ctx.gestures.any_active(RELEVANT_GESTURES[state.state]):
            state.unasserted_since = None
            return False

        # A clock that went backwards restarts the timer instead of freezing it
        if state.unasserted_since is None or ctx.now < state.unasserted_since:
            state.unasserted_since = ctx.now
            return False

        if ctx.now - state.unasserted_since > self.cfg["IDLE_TIMEOUT"]:
            logger.warning("⏱️ %s timed out without input, forcing IDLE", state.state.name)
            state.reset_to_idle(ctx.now)
            self.primary_handler.reset()
            return True
        return False

    def process(self, gestures: GestureSet, cursor: Optional[Point2D] = None,
                now: Optional[float] = None) -> InteractionState:
        """
        Runs one tick. Actions are emitted synchronously, in decision order.
        Returns the interaction state after the tick.
        """
        now = time.monotonic() if now is None else now
        ctx = HandlerContext(gestures, cursor, now, self.state, self.actions, self.cfg)

        if not self._idle_timeout_expired(ctx):
            self.primary_handler.handle(ctx)

        if self.expression_handler is not None:
            self.expression_handler.handle(ctx)

        self.last_gestures = gestures
        self.last_cursor = cursor
        self.ticks += 1
        return self.state.state

    def reset(self):
        self.state.reset_to_idle()
        self.primary_handler.reset()
        if self.expression_handler is not None:
            self.expression_handler.reset()

    def snapshot(self) -> Dict[str, Any]:
        """Read-only debug view of the controller."""
        rotation = self.state.rotation
        holds = {}
        if isinstance(self.primary_handler, WhiteboardHandler):
            holds = {
                "color_hold_start": self.primary_handler.color_hold_start,
                "open_hold_start": self.primary_handler.open_hold_start,
                "clear_fired": self.primary_handler.clear_fired,
            }
        return {
            "ticks": self.ticks,
            "state": self.state.state.value,
            "handle": self.state.handle,
            "rotation": dataclasses.asdict(rotation) if rotation else None,
            "unasserted_since": self.state.unasserted_since,
            "holds": holds,
            "gestures": self.last_gestures.active_names(),
            "cursor": (self.last_cursor.x, self.last_cursor.y) if self.last_cursor else None,
            "recent_actions": [name for name, _ in self.actions.recent()],
        }
