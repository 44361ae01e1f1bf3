"""
GesturePilot Whiteboard Logic (Draw / Erase / Palette / Clear).
==============================================================

Primary strokes:
    pointer -> draw, fist -> erase. Each stroke ends the moment its
    gesture drops.

Utility holds (Idle only):
    openHand over the palette   -> pick color every COLOR_PICK_INTERVAL
    openHand anywhere else      -> clear the board once after CLEAR_HOLD_TIME
Hold timers reset when the hand disappears, the gesture changes, or a
stroke starts. A clear does not re-fire until the open hand is re-asserted.
"""
import logging
from typing import Optional

from gesturepilot.control.handlers import HandlerContext
from gesturepilot.core.types import InteractionState

logger = logging.getLogger(__name__)


class WhiteboardHandler:
    def __init__(self):
        self.color_hold_start: Optional[float] = None
        self.open_hold_start: Optional[float] = None
        self.clear_fired = False

    def handle(self, ctx: HandlerContext):
        self._handle_utility(ctx)

        state = ctx.state.state
        if state == InteractionState.IDLE:
            self._handle_idle(ctx)
        elif state == InteractionState.DRAWING:
            self._handle_drawing(ctx)
        elif state == InteractionState.ERASING:
            self._handle_erasing(ctx)
        else:
            ctx.state.reset_to_idle(ctx.now)

    def reset(self):
        self.color_hold_start = None
        self.open_hold_start = None
        self.clear_fired = False

    # --- STROKES ---
    def _handle_idle(self, ctx: HandlerContext):
        if ctx.cursor is None:
            return
        g = ctx.gestures
        if g.pointer:
            ctx.actions.call("start_drawing", ctx.cursor)
            ctx.state.transition(InteractionState.DRAWING, ctx.now)
        elif g.fist:
            ctx.actions.call("start_erasing", ctx.cursor)
            ctx.state.transition(InteractionState.ERASING, ctx.now)

    def _handle_drawing(self, ctx: HandlerContext):
        if ctx.gestures.pointer and ctx.cursor is not None:
            ctx.actions.call("continue_drawing", ctx.cursor)
            return
        ctx.actions.call("end_drawing")
        ctx.state.transition(InteractionState.IDLE, ctx.now)

    def _handle_erasing(self, ctx: HandlerContext):
        if ctx.gestures.fist and ctx.cursor is not None:
            ctx.actions.call("continue_erasing", ctx.cursor)
            return
        ctx.actions.call("end_erasing")
        ctx.state.transition(InteractionState.IDLE, ctx.now)

    # --- UTILITY HOLDS ---
    def _handle_utility(self, ctx: HandlerContext):
        if ctx.cursor is None or not ctx.state.is_idle or not ctx.gestures.open_hand:
            self.reset()
            return

        if ctx.actions.call("is_pointer_in_palette", ctx.cursor):
            self.open_hold_start = None
            self.clear_fired = False
            if self.color_hold_start is None:
                self.color_hold_start = ctx.now
            if ctx.now - self.color_hold_start >= ctx.config["COLOR_PICK_INTERVAL"]:
                ctx.actions.call("attempt_color_pick", ctx.cursor)
                self.color_hold_start = ctx.now
            return

        # Open hand outside the palette = "clear" gesture
        self.color_hold_start = None
        if self.open_hold_start is None:
            self.open_hold_start = ctx.now
            self.clear_fired = False

        if not self.clear_fired and ctx.now - self.open_hold_start >= ctx.config["CLEAR_HOLD_TIME"]:
            logger.info("🧽 Clear board")
            ctx.actions.call("clear_board")
            self.clear_fired = True
