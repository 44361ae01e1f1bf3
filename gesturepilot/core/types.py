"""
GesturePilot Types.
Central definition of Data Contracts to prevent circular imports.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple


# --- PHYSICS TYPES ---
@dataclass(frozen=True)
class Point2D:
    x: float
    y: float


# --- GESTURE TYPES ---
class Gesture(Enum):
    OPEN_HAND = "openHand"
    FIST = "fist"
    POINTER = "pointer"
    PINCH = "pinch"
    WINK = "wink"
    SMILE = "smile"
    FROWN = "frown"

    @classmethod
    def from_name(cls, name: str) -> Optional["Gesture"]:
        for member in cls:
            if member.value == name:
                return member
        return None


class InteractionState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    ROTATING = "rotating"
    SLINGSHOT = "slingshot"
    DRAWING = "drawing"
    ERASING = "erasing"


# --- VISION INPUT ---
@dataclass(frozen=True)
class LandmarkFrame:
    """
    One processed video frame as reported by the vision model.

    `hand` is None when no hand was tracked (distinct from a hand with zero
    classifier confidence). `categories` holds (name, score) pairs.
    """
    timestamp: float
    hand: Optional[Sequence[Any]] = None
    categories: Tuple[Tuple[str, float], ...] = ()
    face: Optional[Sequence[Any]] = None

    @property
    def has_hand(self) -> bool:
        return bool(self.hand)

    @property
    def has_face(self) -> bool:
        return bool(self.face)

    def score(self, names: Iterable[str]) -> float:
        """Returns the score of the first category whose name is in `names`."""
        wanted = set(names)
        for name, score in self.categories:
            if name in wanted:
                return float(score or 0.0)
        return 0.0


@dataclass(frozen=True)
class GeometricSignals:
    """Derived per-frame geometry. Recomputed from scratch every frame."""
    index_extended: bool = False
    others_retracted: bool = False
    thumb_ok: bool = False
    index_straight: bool = False
    is_pinch_geometric: bool = False
    is_fist_geometric: bool = False
    is_open_hand_geometric: bool = False
    pointing_angle_raw: Optional[float] = None
    pinch_position: Optional[Point2D] = None
    pinch_distance: Optional[float] = None
    index_distance: Optional[float] = None

    @property
    def is_pointer_geometric(self) -> bool:
        return self.index_extended and self.others_retracted and self.thumb_ok and self.index_straight


# --- STABLE OUTPUT ---
@dataclass(frozen=True)
class GestureSet:
    """Immutable per-tick snapshot consumed by the interaction controller."""
    open_hand: bool = False
    fist: bool = False
    pointer: bool = False
    pinch: bool = False
    wink: bool = False
    smile: bool = False
    frown: bool = False
    hand_present: bool = False
    angle: float = 0.0
    index_distance: Optional[float] = None
    pinch_position: Optional[Point2D] = None
    pinch_distance: Optional[float] = None

    _FIELDS = {
        Gesture.OPEN_HAND: "open_hand",
        Gesture.FIST: "fist",
        Gesture.POINTER: "pointer",
        Gesture.PINCH: "pinch",
        Gesture.WINK: "wink",
        Gesture.SMILE: "smile",
        Gesture.FROWN: "frown",
    }

    @classmethod
    def from_flags(cls, flags: Dict[str, bool], **extra) -> "GestureSet":
        kwargs = {cls._FIELDS[g]: bool(flags.get(g.value, False)) for g in Gesture}
        kwargs.update(extra)
        return cls(**kwargs)

    def is_active(self, gesture: Gesture) -> bool:
        return getattr(self, self._FIELDS[gesture])

    def any_active(self, gestures: Iterable[Gesture]) -> bool:
        return any(self.is_active(g) for g in gestures)

    def active_names(self) -> Tuple[str, ...]:
        return tuple(g.value for g in Gesture if self.is_active(g))


# --- INTERACTION CONTEXT ---
@dataclass
class RotationContext:
    """Lives only while the controller is Rotating."""
    start_hand_angle: float
    start_component_angle: float
    last_hand_angle: float
    sensitivity: float
    component_angle: float = field(default=0.0)
