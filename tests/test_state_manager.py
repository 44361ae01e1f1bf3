import unittest

from gesturepilot.core.state_manager import StateManager
from gesturepilot.core.types import InteractionState, RotationContext


class TestStateManager(unittest.TestCase):
    def setUp(self):
        """Runs before every test."""
        self.state = StateManager()

    def test_initial_state(self):
        """Verify the system starts idle with no context."""
        self.assertTrue(self.state.is_idle)
        self.assertIsNone(self.state.handle)
        self.assertIsNone(self.state.rotation)

    def test_transition_history(self):
        self.state.transition(InteractionState.DRAGGING, now=1.0)
        self.assertEqual(self.state.state, InteractionState.DRAGGING)
        self.assertEqual(self.state.prev_state, InteractionState.IDLE)
        self.assertEqual(self.state.entered_at, 1.0)

        self.state.transition(InteractionState.ROTATING, now=2.0)
        self.assertEqual(self.state.prev_state, InteractionState.DRAGGING)

    def test_transition_clears_timer(self):
        self.state.transition(InteractionState.DRAGGING)
        self.state.unasserted_since = 5.0
        self.state.transition(InteractionState.SLINGSHOT)
        self.assertIsNone(self.state.unasserted_since)

    def test_rotation_context_lives_only_in_rotating(self):
        self.state.transition(InteractionState.ROTATING)
        self.state.rotation = RotationContext(0.0, 0.0, 0.0, 2.5)
        self.state.transition(InteractionState.DRAGGING)
        self.assertIsNone(self.state.rotation)

    def test_reset_to_idle(self):
        """Verify handles are forgotten on reset."""
        self.state.handle = "component-7"
        self.state.transition(InteractionState.DRAGGING)
        self.state.reset_to_idle(now=3.0)
        self.assertTrue(self.state.is_idle)
        self.assertIsNone(self.state.handle)


if __name__ == '__main__':
    unittest.main()
