import math
import unittest

import numpy as np

from gesturepilot.config import build_config
from gesturepilot.core.kinematics import HandGeometry
from gesturepilot.hand_utils import INDEX_TIP, THUMB_TIP, WRIST, to_point_array
from tests import hand_fixtures as hands


# Mock for MediaPipe Landmark structure
class MockLandmark:
    def __init__(self, x, y, z=0.0):
        self.x = x
        self.y = y
        self.z = z


class TestHandUtils(unittest.TestCase):
    def test_accepts_objects_dicts_and_lists(self):
        landmarks = [MockLandmark(0.1, 0.2), {"x": 0.3, "y": 0.4}, [0.5, 0.6, 0.7]]
        lm = to_point_array(landmarks, 3)
        np.testing.assert_allclose(lm[0], [0.1, 0.2, 0.0])
        np.testing.assert_allclose(lm[1], [0.3, 0.4, 0.0])
        np.testing.assert_allclose(lm[2], [0.5, 0.6, 0.7])

    def test_missing_and_non_finite_points_become_nan(self):
        landmarks = [None, [float("nan"), 0.5], ["bad", 0.1], [0.2]]
        lm = to_point_array(landmarks, 5)
        self.assertTrue(np.isnan(lm).all())


class TestHandGeometry(unittest.TestCase):
    def setUp(self):
        self.geometry = HandGeometry(build_config())

    def test_open_hand(self):
        s = self.geometry.extract(hands.open_hand())
        self.assertTrue(s.is_open_hand_geometric)
        self.assertFalse(s.is_fist_geometric)
        self.assertFalse(s.is_pinch_geometric)
        self.assertFalse(s.is_pointer_geometric)

    def test_fist(self):
        s = self.geometry.extract(hands.fist())
        self.assertTrue(s.is_fist_geometric)
        self.assertFalse(s.is_open_hand_geometric)
        self.assertFalse(s.is_pinch_geometric)
        self.assertFalse(s.index_extended)

    def test_pointer(self):
        s = self.geometry.extract(hands.pointer())
        self.assertTrue(s.index_extended)
        self.assertTrue(s.others_retracted)
        self.assertTrue(s.thumb_ok)
        self.assertTrue(s.index_straight)
        self.assertTrue(s.is_pointer_geometric)
        self.assertFalse(s.is_fist_geometric)
        self.assertAlmostEqual(s.pointing_angle_raw, math.degrees(math.atan2(-0.27, -0.05)), places=6)

    def test_pointer_rejected_with_thumb_out(self):
        lm = hands.pointer()
        lm[THUMB_TIP] = [0.31, 0.62, 0.0]
        s = self.geometry.extract(lm)
        self.assertFalse(s.thumb_ok)
        self.assertFalse(s.is_pointer_geometric)

    def test_pointer_rejected_when_index_bent(self):
        lm = hands.pointer()
        # Tip still far from the wrist but hooked sideways past the PIP
        lm[INDEX_TIP] = [0.30, 0.58, 0.0]
        s = self.geometry.extract(lm)
        self.assertFalse(s.index_straight)
        self.assertFalse(s.is_pointer_geometric)

    def test_pinch(self):
        s = self.geometry.extract(hands.pinch())
        self.assertTrue(s.is_pinch_geometric)
        self.assertFalse(s.is_open_hand_geometric)
        self.assertAlmostEqual(s.pinch_position.x, 0.395)
        self.assertAlmostEqual(s.pinch_position.y, 0.6225)
        self.assertAlmostEqual(s.pinch_distance, math.hypot(0.01, 0.015))

    def test_pinch_requires_fingers_facing(self):
        lm = hands.pinch()
        # Same tip distance, but the thumb now points away from the index
        lm[2] = [0.40, 0.58, 0.0]
        s = self.geometry.extract(lm)
        self.assertFalse(s.is_pinch_geometric)
        self.assertIsNotNone(s.pinch_distance)

    def test_pinch_survives_small_hand(self):
        cfg = build_config()
        lm = to_point_array(hands.pinch(), 21)
        small = lm.copy()
        # Shrink the whole hand around the wrist: the same pose stays a pinch
        small[:, :2] = lm[WRIST, :2] + (lm[:, :2] - lm[WRIST, :2]) * 0.5
        self.assertTrue(HandGeometry(cfg).check_pinch(small)[0])

    def test_no_hand(self):
        self.assertIsNone(self.geometry.extract(None))
        self.assertIsNone(self.geometry.extract([]))

    def test_partial_hand_degrades(self):
        lm = hands.open_hand()[:9]  # Thumb and index only
        s = self.geometry.extract(lm)
        self.assertIsNotNone(s)
        self.assertFalse(s.is_open_hand_geometric)
        self.assertFalse(s.others_retracted)

    def test_ratios_are_scale_invariant(self):
        lm = to_point_array(hands.open_hand(), 21)
        far = lm.copy()
        far[:, :2] = lm[WRIST, :2] + (lm[:, :2] - lm[WRIST, :2]) * 0.4
        near_ratios = self.geometry.digit_ratios(lm)
        far_ratios = self.geometry.digit_ratios(far)
        for name in near_ratios:
            self.assertAlmostEqual(near_ratios[name], far_ratios[name])


if __name__ == '__main__':
    unittest.main()
