"""
GesturePilot Core Interfaces.
Defines the abstract contracts for the two external collaborators:
the vision model (inbound) and the interactive scene (outbound).
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from gesturepilot.core.types import LandmarkFrame, Point2D


class IVisionModel(ABC):
    """
    Inbound Protocol. Given a frame reference and a media timestamp, returns
    at most one hand (21 landmarks + ranked categories) and at most one face.
    """
    @abstractmethod
    def recognize(self, frame: Any, timestamp: float) -> LandmarkFrame: pass


class IInteractiveScene(ABC):
    """
    Outbound Protocol. The closed action vocabulary of the state machine.
    The scene is free to ignore any call; only the documented return
    values are ever read back.
    """

    # --- MANIPULATION ---
    @abstractmethod
    def select(self, point: Point2D) -> Optional[Any]: pass
    @abstractmethod
    def drag(self, handle: Any, point: Point2D) -> None: pass
    @abstractmethod
    def drop(self, handle: Any) -> None: pass

    # --- ROTATION ---
    @abstractmethod
    def rotate_start(self, handle: Any, point: Point2D, angle: float) -> Optional[dict]: pass
    @abstractmethod
    def get_current_angle(self, handle: Any) -> Optional[dict]: pass
    @abstractmethod
    def rotate(self, handle: Any, angle: float, delta: float) -> None: pass
    @abstractmethod
    def rotate_end(self, handle: Any) -> None: pass
    @abstractmethod
    def adjust_trajectory(self, angle: float, index_distance: Optional[float], point: Optional[Point2D]) -> None: pass

    # --- SLINGSHOT ---
    @abstractmethod
    def start_slingshot(self, point: Point2D, distance: Optional[float], angle: float) -> Optional[Any]: pass
    @abstractmethod
    def update_slingshot(self, point: Point2D, distance: Optional[float], angle: float) -> None: pass
    @abstractmethod
    def release_slingshot(self, handle: Any) -> None: pass

    # --- WHITEBOARD ---
    @abstractmethod
    def start_drawing(self, point: Point2D) -> None: pass
    @abstractmethod
    def continue_drawing(self, point: Point2D) -> None: pass
    @abstractmethod
    def end_drawing(self) -> None: pass
    @abstractmethod
    def start_erasing(self, point: Point2D) -> None: pass
    @abstractmethod
    def continue_erasing(self, point: Point2D) -> None: pass
    @abstractmethod
    def end_erasing(self) -> None: pass
    @abstractmethod
    def is_pointer_in_palette(self, point: Point2D) -> bool: pass
    @abstractmethod
    def attempt_color_pick(self, point: Point2D) -> None: pass
    @abstractmethod
    def clear_board(self) -> None: pass

    # --- LAB (Face-driven) ---
    @abstractmethod
    def evaluate(self, requested: bool) -> None: pass
    @abstractmethod
    def toggle_switch(self) -> None: pass
    @abstractmethod
    def request_assistance(self) -> None: pass
