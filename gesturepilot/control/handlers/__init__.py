"""
Handler Context Definition.
Defines the Data Transfer Object (DTO) for the Control Layer.
"""

from gesturepilot.core.types import GestureSet


class HandlerContext:
    """
    A unified context object containing all data required for a Handler to make decisions.
    Wraps the stable GestureSet, the filtered cursor, the tick clock,
    the StateManager, the SceneDispatcher and the configuration.
    """
    def __init__(self, gestures: GestureSet, cursor, now: float, state, actions, config):
        # 1. Perception (already stabilized)
        self.gestures = gestures
        self.cursor = cursor    # Point2D or None

        # 2. Tick clock (seconds)
        self.now = now

        # 3. Global Resources
        self.state = state      # Shared StateManager
        self.actions = actions  # SceneDispatcher
        self.config = config    # Master Config Dict

    # Convenience aliases
    @property
    def angle(self) -> float: return self.gestures.angle
    @property
    def handle(self): return self.state.handle
