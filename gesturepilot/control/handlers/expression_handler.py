"""GesturePilot Expression Handler (Lab variant, face-driven)."""
import logging
from typing import Optional

from gesturepilot.control.handlers import HandlerContext

logger = logging.getLogger(__name__)


class ExpressionHandler:
    """
    Fires on the rising edge of the already-debounced face gestures,
    regardless of the primary interaction state.
    """
    def __init__(self):
        self.prev_smile = False
        self.prev_wink = False
        self.prev_frown = False
        self.last_assist_time: Optional[float] = None

    def handle(self, ctx: HandlerContext):
        g = ctx.gestures

        if g.smile and not self.prev_smile:
            ctx.actions.call("evaluate", True)

        if g.wink and not self.prev_wink:
            ctx.actions.call("toggle_switch")

        if g.frown and not self.prev_frown:
            cooldown = ctx.config["ASSIST_COOLDOWN"]
            if self.last_assist_time is None or (ctx.now - self.last_assist_time) >= cooldown:
                logger.info("🆘 Assistance requested")
                ctx.actions.call("request_assistance")
                self.last_assist_time = ctx.now
            else:
                logger.debug("Assistance rate-limited")

        self.prev_smile, self.prev_wink, self.prev_frown = g.smile, g.wink, g.frown

    def reset(self):
        self.prev_smile = self.prev_wink = self.prev_frown = False
