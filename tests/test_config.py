import unittest

from gesturepilot.config import CONFIG, GESTURE_PROFILES, ConfigError, build_config


class TestBuildConfig(unittest.TestCase):
    def test_variant_presets_apply(self):
        cfg = build_config("lab")
        self.assertEqual(cfg["VARIANT"], "lab")
        self.assertTrue(cfg["EXPRESSIONS_ENABLED"])

        cfg = build_config("manipulation")
        self.assertTrue(cfg["CALIBRATION_ENABLED"])
        self.assertEqual(cfg["GESTURE_PROFILES"]["fist"]["off_frames"], 6)

    def test_copies_are_private(self):
        cfg = build_config("whiteboard")
        cfg["GESTURE_PROFILES"]["pointer"]["on_frames"] = 99
        cfg["SOLO_SCORE"]["pointer"] = 0.0
        self.assertEqual(GESTURE_PROFILES["pointer"]["on_frames"], 4)
        self.assertEqual(CONFIG["SOLO_SCORE"]["pointer"], 0.45)
        self.assertEqual(build_config("whiteboard")["GESTURE_PROFILES"]["pointer"]["on_frames"], 4)

    def test_overrides(self):
        cfg = build_config("whiteboard", overrides={"IDLE_TIMEOUT": 0.2}, profiles={"pinch": {"on_frames": 2}})
        self.assertEqual(cfg["IDLE_TIMEOUT"], 0.2)
        self.assertEqual(cfg["GESTURE_PROFILES"]["pinch"]["on_frames"], 2)

    def test_rejects_unknowns(self):
        with self.assertRaises(ConfigError):
            build_config("kiosk")
        with self.assertRaises(ConfigError):
            build_config(overrides={"NOT_A_KEY": 1})
        with self.assertRaises(ConfigError):
            build_config(profiles={"thumbsUp": {"on_frames": 2}})
        with self.assertRaises(ConfigError):
            build_config(profiles={"fist": {"speed": 2}})

    def test_rejects_invalid_values(self):
        with self.assertRaises(ConfigError):
            build_config(profiles={"fist": {"on_frames": 0}})
        with self.assertRaises(ConfigError):
            build_config(profiles={"fist": {"smoothing": 1.5}})
        with self.assertRaises(ConfigError):
            build_config(overrides={"CONSISTENCY_WINDOW": 20})
        with self.assertRaises(ConfigError):
            build_config(overrides={"CANVAS_WIDTH": 0})

    def test_config_error_is_value_error(self):
        self.assertTrue(issubclass(ConfigError, ValueError))


if __name__ == '__main__':
    unittest.main()
