import unittest

from gesturepilot.config import build_config
from gesturepilot.core.stabilizer import (
    GestureChannel, GestureHistory, GestureLatch, GestureSmoother, TemporalStabilizer,
)


class TestGestureLatch(unittest.TestCase):
    def test_switches_on_after_on_frames(self):
        latch = GestureLatch(on_frames=3, off_frames=2)
        self.assertEqual([latch.update(True) for _ in range(4)], [False, False, True, True])

    def test_switches_off_after_off_frames(self):
        latch = GestureLatch(on_frames=1, off_frames=3)
        latch.update(True)
        self.assertEqual([latch.update(False) for _ in range(3)], [True, True, False])

    def test_short_glitch_is_ignored(self):
        latch = GestureLatch(on_frames=3, off_frames=3)
        for value in (True, True, False, True, True):
            self.assertFalse(latch.update(value))
        self.assertTrue(latch.update(True))


class TestGestureSmoother(unittest.TestCase):
    def test_first_sample_snaps(self):
        smoother = GestureSmoother(0.3)
        self.assertEqual(smoother.update(1.0), 1.0)

    def test_eases_toward_target(self):
        smoother = GestureSmoother(0.5)
        smoother.update(0.0)
        self.assertAlmostEqual(smoother.update(1.0), 0.5)
        self.assertAlmostEqual(smoother.update(1.0), 0.75)

    def test_reset_unprimes(self):
        smoother = GestureSmoother(0.2)
        smoother.update(0.0)
        smoother.reset()
        self.assertEqual(smoother.update(1.0), 1.0)


class TestGestureHistory(unittest.TestCase):
    def test_consistency_over_recent_window(self):
        history = GestureHistory(10)
        for value in (True,) * 6 + (False, False, True, False):
            history.push(value)
        self.assertEqual(len(history.entries), 10)
        self.assertAlmostEqual(history.consistency(5), 0.4)

    def test_bounded(self):
        history = GestureHistory(10)
        for _ in range(25):
            history.push(True)
        self.assertEqual(len(history.entries), 10)

    def test_empty(self):
        self.assertEqual(GestureHistory(10).consistency(5), 0.0)


class TestTemporalStabilizer(unittest.TestCase):
    def setUp(self):
        self.stabilizer = TemporalStabilizer(build_config("whiteboard"))

    def test_pointer_turns_on_at_fourth_frame(self):
        flags = [self.stabilizer.update({"pointer": True})["pointer"] for _ in range(4)]
        self.assertEqual(flags, [False, False, False, True])

    def test_single_dropped_frame_does_not_release(self):
        for _ in range(6):
            self.stabilizer.update({"fist": True})
        self.assertTrue(self.stabilizer.update({})["fist"])
        self.assertTrue(self.stabilizer.update({"fist": True})["fist"])

    def test_missing_gestures_decay(self):
        for _ in range(6):
            self.stabilizer.update({"openHand": True})
        states = None
        for _ in range(12):
            states = self.stabilizer.decay(["openHand"])
        self.assertFalse(states["openHand"])

    def test_channels_are_independent(self):
        for _ in range(6):
            states = self.stabilizer.update({"fist": True})
        self.assertTrue(states["fist"])
        self.assertFalse(any(v for k, v in states.items() if k != "fist"))

    def test_instances_share_nothing(self):
        other = TemporalStabilizer(build_config("whiteboard"))
        for _ in range(6):
            self.stabilizer.update({"pinch": True})
        self.assertFalse(other.states()["pinch"])

    def test_profile_overrides_apply(self):
        stabilizer = TemporalStabilizer(build_config("whiteboard", profiles={"pinch": {"on_frames": 1}}))
        self.assertTrue(stabilizer.update({"pinch": True})["pinch"])

    def test_reset(self):
        for _ in range(6):
            self.stabilizer.update({"smile": True})
        self.stabilizer.reset()
        self.assertFalse(self.stabilizer.states()["smile"])
        self.assertEqual(len(self.stabilizer.channels["smile"].history.entries), 0)

    def test_snapshot_is_plain_data(self):
        self.stabilizer.update({"wink": True})
        snap = self.stabilizer.snapshot()
        self.assertEqual(snap["wink"]["active_streak"], 1)
        self.assertEqual(snap["wink"]["consistency"], 1.0)


class TestGestureChannel(unittest.TestCase):
    def test_inconsistent_detections_never_latch(self):
        profile = {"on_frames": 2, "off_frames": 2, "smoothing": 0.3, "consistency": 0.7}
        channel = GestureChannel(profile, history_size=10, window=5, cut=0.5)
        for i in range(20):
            self.assertFalse(channel.update(i % 2 == 1))


if __name__ == '__main__':
    unittest.main()
