"""
GesturePilot - Main Entry Point.
================================

This module glues the "Layer Cake" together:
1. Perception (IVisionModel -> LandmarkFrame), throttled on media time.
2. Cognition (GesturePipeline -> GestureSet + cursor).
3. Control (InteractionController -> scene actions).

It also replays recorded sessions, which is how thresholds get validated
against real hands instead of guessed.

Usage:
    $ python -m gesturepilot.main session.jsonl --variant whiteboard

Session format (one JSON object per line):
    {"t": 0.033, "hand": [[x, y, z], ...] | null,
     "gestures": [["Pointing_Up", 0.82], ...], "face": [[x, y, z], ...] | null}
"""
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from gesturepilot.config import VARIANT_PRESETS, ConfigError, build_config
from gesturepilot.control.controller import InteractionController
from gesturepilot.control.scene_dispatcher import HeadlessScene
from gesturepilot.core.interfaces import IVisionModel
from gesturepilot.core.types import InteractionState, LandmarkFrame
from gesturepilot.gesture_engine import GesturePipeline

logger = logging.getLogger(__name__)


class SessionFormatError(ValueError):
    """Raised for unreadable recorded-session lines."""


class GesturePilot:
    """
    One self-contained instance: pipeline + controller, no shared globals.
    Call `tick()` once per animation frame.
    """
    def __init__(self, scene: Any = None, vision: Optional[IVisionModel] = None,
                 variant: Optional[str] = None, config: Optional[Dict[str, Any]] = None,
                 listener=None):
        self.cfg = config or build_config(variant)
        self.pipeline = GesturePipeline(self.cfg)
        self.controller = InteractionController(scene, self.cfg, listener=listener)
        self.vision = vision
        self.last_media_time: Optional[float] = None
        self.last_frame_time = 0.0

    def tick(self, video_frame: Any = None, media_time: Optional[float] = None,
             now: Optional[float] = None) -> InteractionState:
        """
        Runs inference only when the media time advanced; the controller
        ticks regardless so hold timers keep running.
        """
        if self.vision is not None and video_frame is not None and media_time is not None:
            if media_time != self.last_media_time:
                self.last_media_time = media_time
                self.pipeline.process(self.vision.recognize(video_frame, media_time))
        return self.controller.process(self.pipeline.latest, self.pipeline.cursor, now)

    def feed(self, frame: Optional[LandmarkFrame], now: Optional[float] = None) -> InteractionState:
        """
        Ticks with an already-recognized frame (replay, tests).
        Without `now`, the clock is the frame timestamp; a None frame
        reuses the last one so frame time and wall time never mix.
        """
        self.pipeline.process(frame)
        if frame is not None:
            self.last_frame_time = frame.timestamp
        if now is None:
            now = self.last_frame_time
        return self.controller.process(self.pipeline.latest, self.pipeline.cursor, now)

    def reset(self):
        self.pipeline.reset()
        self.controller.reset()
        self.last_media_time = None
        self.last_frame_time = 0.0

    def snapshot(self) -> Dict[str, Any]:
        return {"pipeline": self.pipeline.snapshot(), "controller": self.controller.snapshot()}


# --- SESSION REPLAY ---
def frame_from_record(record: Dict[str, Any]) -> LandmarkFrame:
    categories = tuple((str(name), float(score)) for name, score in (record.get("gestures") or []))
    return LandmarkFrame(
        timestamp=float(record["t"]),
        hand=record.get("hand") or None,
        categories=categories,
        face=record.get("face") or None,
    )


def load_session(path: str) -> List[LandmarkFrame]:
    frames = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                record = json.loads(line)
                frames.append(frame_from_record(record))
            except json.JSONDecodeError as e:
                raise SessionFormatError(f"{path}:{lineno}: invalid JSON ({e.msg})") from e
            except (KeyError, TypeError, ValueError) as e:
                raise SessionFormatError(f"{path}:{lineno}: invalid frame record ({e})") from e
    return frames


def replay(frames: List[LandmarkFrame], pilot: GesturePilot) -> None:
    logger.info("Replaying %d frames", len(frames))
    for frame in frames:
        pilot.feed(frame)
    logger.info("Replay finished in state %s", pilot.controller.interaction_state.name)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay a recorded gesture session.")
    parser.add_argument("session", help="JSON-lines session file")
    parser.add_argument("--variant", default="manipulation", choices=sorted(VARIANT_PRESETS))
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        frames = load_session(args.session)
        cfg = build_config(args.variant)
    except (OSError, SessionFormatError, ConfigError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    def print_action(action, action_args):
        print(f"{action}{action_args}")

    print(f"🚀 REPLAY: {len(frames)} frames ({args.variant})")
    pilot = GesturePilot(scene=HeadlessScene(), config=cfg, listener=print_action)
    replay(frames, pilot)
    print(f"🔴 DONE: final state {pilot.controller.interaction_state.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
