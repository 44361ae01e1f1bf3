"""
GesturePilot State Management.
Owns the single active InteractionState and everything scoped to it.
"""
import logging
from typing import Any, Optional

from gesturepilot.core.types import InteractionState, RotationContext

logger = logging.getLogger(__name__)


class StateManager:
    def __init__(self):
        # --- INTERACTION STATE ---
        self.state = InteractionState.IDLE
        self.prev_state = InteractionState.IDLE

        # --- SCENE-SIDE CONTEXT ---
        self.handle: Optional[Any] = None
        self.rotation: Optional[RotationContext] = None

        # --- TIMERS ---
        self.unasserted_since: Optional[float] = None
        self.entered_at = 0.0

    @property
    def is_idle(self) -> bool:
        return self.state == InteractionState.IDLE

    def transition(self, new_state: InteractionState, now: float = 0.0):
        """The only way the interaction state changes."""
        if new_state == self.state:
            return
        logger.info("🔀 %s -> %s", self.state.name, new_state.name)
        self.prev_state = self.state
        self.state = new_state
        self.entered_at = now
        self.unasserted_since = None
        if new_state != InteractionState.ROTATING:
            self.rotation = None

    def reset_to_idle(self, now: float = 0.0):
        """Drops every context object. Handles are forgotten, not released."""
        self.transition(InteractionState.IDLE, now)
        self.handle = None
        self.rotation = None
