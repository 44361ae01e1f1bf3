import unittest

from gesturepilot.config import build_config
from gesturepilot.core.types import LandmarkFrame
from gesturepilot.gesture_engine import GesturePipeline
from tests import hand_fixtures as fixtures

STEP = 1.0 / 30


class TestGesturePipeline(unittest.TestCase):
    def setUp(self):
        self.pipeline = GesturePipeline(build_config("whiteboard"))

    def feed(self, pose, count, start=0):
        result = None
        for i in range(start, start + count):
            result = self.pipeline.process(fixtures.frame(pose, i * STEP))
        return result

    def test_pointer_latches_on_fourth_frame(self):
        flags = [self.pipeline.process(fixtures.frame("pointer", i * STEP)).pointer for i in range(4)]
        self.assertEqual(flags, [False, False, False, True])

    def test_one_hand_gesture_at_a_time(self):
        for pose, attr in (("openHand", "open_hand"), ("fist", "fist"), ("pinch", "pinch")):
            with self.subTest(pose=pose):
                self.pipeline.reset()
                result = self.feed(pose, 8)
                self.assertTrue(getattr(result, attr))
                self.assertEqual(len(result.active_names()), 1)

    def test_cursor_follows_wrist(self):
        self.feed("openHand", 1)
        cursor = self.pipeline.cursor
        self.assertAlmostEqual(cursor.x, 640.0)
        self.assertAlmostEqual(cursor.y, 576.0)

    def test_angle_only_tracks_pointing_hands(self):
        self.feed("openHand", 5)
        self.assertFalse(self.pipeline.angle.ready)
        result = self.feed("pointer", 5, start=5)
        self.assertTrue(self.pipeline.angle.ready)
        self.assertAlmostEqual(result.angle, -100.49, places=1)
        self.assertAlmostEqual(result.index_distance, 0.2746, places=3)

    def test_pinch_reports_position(self):
        result = self.feed("pinch", 5)
        self.assertAlmostEqual(result.pinch_position.x, 0.395)
        self.assertIsNotNone(result.pinch_distance)

    def test_repeated_timestamp_is_skipped(self):
        frame = fixtures.frame("pointer", 1.0)
        self.pipeline.process(frame)
        self.pipeline.process(frame)
        self.assertEqual(self.pipeline.frames_processed, 1)

    def test_hand_loss_resets_filters(self):
        self.feed("pointer", 6)
        result = self.pipeline.process(fixtures.empty_frame(10.0))
        self.assertFalse(result.hand_present)
        self.assertIsNone(self.pipeline.cursor)
        self.assertFalse(self.pipeline.pointer.ready)
        self.assertFalse(self.pipeline.angle.ready)
        self.assertIsNone(result.pinch_position)

    def test_missing_wrist_counts_as_hand_loss(self):
        hand = fixtures.pointer()
        hand[0] = None
        result = self.pipeline.process(LandmarkFrame(timestamp=0.0, hand=hand))
        self.assertFalse(result.hand_present)
        self.assertNotIn("pointer", self.pipeline.last_raw)

    def test_none_frame_decays(self):
        self.feed("fist", 6)
        for _ in range(12):
            result = self.pipeline.process(None)
        self.assertFalse(result.fist)

    def test_face_expressions(self):
        pipeline = GesturePipeline(build_config("lab"))
        face = fixtures.build_face(smile=True)
        for i in range(4):
            result = pipeline.process(LandmarkFrame(timestamp=i * STEP, face=face))
        self.assertTrue(result.smile)
        self.assertFalse(result.hand_present)

    def test_snapshot_is_detached(self):
        self.feed("pointer", 4)
        snap = self.pipeline.snapshot()
        self.assertEqual(snap["gestures"], ("pointer",))
        self.assertTrue(snap["pointer"]["ready"])
        snap["raw"]["pointer"] = False
        self.assertTrue(self.pipeline.last_raw["pointer"])

    def test_reset_clears_everything(self):
        self.feed("pointer", 6)
        self.pipeline.reset()
        self.assertFalse(self.pipeline.latest.pointer)
        self.assertIsNone(self.pipeline.cursor)
        self.assertFalse(self.pipeline.stabilizer.states()["pointer"])


if __name__ == '__main__':
    unittest.main()
