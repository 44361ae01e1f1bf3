"""
GesturePilot Manipulation Logic (Drag / Rotate / Slingshot).
============================================================

    Idle --fist--> Dragging --pointer--> Rotating
      |               |  ^                  |
      |             pinch +------fist-------+
      +--pinch--> Slingshot <----pinch------+

Pinch always wins: it pre-empts Idle, Dragging and Rotating alike, and
releasing it is the launch trigger. An open hand drops whatever is held.
"""
import logging
from typing import Any, Optional

from gesturepilot.control.handlers import HandlerContext
from gesturepilot.core.angles import shortest_delta, wrap_360
from gesturepilot.core.types import InteractionState, RotationContext
from gesturepilot.hand_utils import is_finite_number

logger = logging.getLogger(__name__)


def _read_angle(result: Any, key: str) -> Optional[float]:
    """Pulls a finite angle out of a scene reply, or None."""
    if isinstance(result, dict):
        value = result.get(key)
    else:
        value = getattr(result, key, None)
    return float(value) if is_finite_number(value) else None


class ManipulationHandler:
    def handle(self, ctx: HandlerContext):
        state = ctx.state.state
        if state == InteractionState.IDLE:
            self._handle_idle(ctx)
        elif state == InteractionState.DRAGGING:
            self._handle_dragging(ctx)
        elif state == InteractionState.ROTATING:
            self._handle_rotating(ctx)
        elif state == InteractionState.SLINGSHOT:
            self._handle_slingshot(ctx)
        else:
            # Whiteboard states never occur here
            ctx.state.reset_to_idle(ctx.now)

    def reset(self): pass

    # --- STATES ---
    def _handle_idle(self, ctx: HandlerContext):
        g = ctx.gestures
        if g.pinch and g.pinch_position is not None:
            self._start_slingshot(ctx)
            return

        if g.fist and ctx.cursor is not None:
            handle = ctx.actions.call("select", ctx.cursor)
            if handle is None:
                return  # Nothing under the cursor
            ctx.state.handle = handle
            ctx.state.transition(InteractionState.DRAGGING, ctx.now)

    def _handle_dragging(self, ctx: HandlerContext):
        g = ctx.gestures
        if g.pinch and g.pinch_position is not None:
            self._drop(ctx)
            self._start_slingshot(ctx)
        elif g.pointer:
            self._begin_rotation(ctx)
        elif g.fist:
            if ctx.cursor is not None:
                ctx.actions.call("drag", ctx.state.handle, ctx.cursor)
        elif g.open_hand:
            self._drop(ctx)
            ctx.state.reset_to_idle(ctx.now)
        # Otherwise hold: the controller's idle timeout decides.

    def _handle_rotating(self, ctx: HandlerContext):
        g = ctx.gestures
        if g.pinch and g.pinch_position is not None:
            self._end_rotation(ctx)
            self._drop(ctx)
            self._start_slingshot(ctx)
        elif g.pointer:
            self._rotate_step(ctx)
        elif g.fist:
            self._end_rotation(ctx)
            ctx.state.transition(InteractionState.DRAGGING, ctx.now)
        elif g.open_hand:
            self._end_rotation(ctx)
            self._drop(ctx)
            ctx.state.reset_to_idle(ctx.now)

    def _handle_slingshot(self, ctx: HandlerContext):
        g = ctx.gestures
        if g.pinch:
            if g.pinch_position is not None:
                ctx.actions.call("update_slingshot", g.pinch_position, g.pinch_distance, g.angle)
            return

        # Letting go IS the launch
        if ctx.state.handle is None:
            logger.warning("Slingshot released without a handle")
        else:
            ctx.actions.call("release_slingshot", ctx.state.handle)
        ctx.state.reset_to_idle(ctx.now)

    # --- ACTIONS ---
    def _start_slingshot(self, ctx: HandlerContext):
        g = ctx.gestures
        handle = ctx.actions.call("start_slingshot", g.pinch_position, g.pinch_distance, g.angle)
        if handle is None:
            ctx.state.reset_to_idle(ctx.now)
            return
        ctx.state.handle = handle
        ctx.state.transition(InteractionState.SLINGSHOT, ctx.now)

    def _drop(self, ctx: HandlerContext):
        if ctx.state.handle is None:
            logger.warning("Drop requested without a handle")
            return
        ctx.actions.call("drop", ctx.state.handle)
        ctx.state.handle = None

    def _begin_rotation(self, ctx: HandlerContext):
        hand_angle = ctx.angle
        baseline = ctx.actions.call("rotate_start", ctx.state.handle, ctx.cursor, hand_angle)
        component = _read_angle(baseline, "componentAngle")
        if component is None:
            logger.warning("rotate_start returned no usable componentAngle, assuming 0")
            component = 0.0

        ctx.state.transition(InteractionState.ROTATING, ctx.now)
        ctx.state.rotation = RotationContext(
            start_hand_angle=hand_angle,
            start_component_angle=component,
            last_hand_angle=hand_angle,
            sensitivity=ctx.config["ROTATION_SENSITIVITY"],
            component_angle=component,
        )

    def _rotate_step(self, ctx: HandlerContext):
        rot = ctx.state.rotation
        if rot is None:
            return

        # 1. Incremental hand delta since last tick (wrap-safe), amplified
        delta = shortest_delta(rot.last_hand_angle, ctx.angle) * rot.sensitivity
        rot.last_hand_angle = ctx.angle

        # 2. Ask the scene where the component is now; it may have moved it
        reported = _read_angle(ctx.actions.call("get_current_angle", ctx.state.handle), "angle")
        if reported is None:
            reported = rot.component_angle

        rot.component_angle = wrap_360(reported + delta)
        ctx.actions.call("rotate", ctx.state.handle, rot.component_angle, delta)
        ctx.actions.call("adjust_trajectory", ctx.angle, ctx.gestures.index_distance, ctx.cursor)

    def _end_rotation(self, ctx: HandlerContext):
        if ctx.state.handle is not None:
            ctx.actions.call("rotate_end", ctx.state.handle)
        ctx.state.rotation = None
