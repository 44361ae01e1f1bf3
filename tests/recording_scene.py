"""Scene double that records every call it receives."""
from gesturepilot.core.interfaces import IInteractiveScene


class RecordingScene(IInteractiveScene):
    def __init__(self, component_angle=0.0, hit=True, in_palette=False):
        self.calls = []
        self.component_angle = component_angle
        self.hit = hit                  # select() finds something under the cursor
        self.in_palette = in_palette

    def names(self):
        return [name for name, _ in self.calls]

    def _record(self, name, *args):
        self.calls.append((name, args))

    def select(self, point):
        self._record("select", point)
        return "component-1" if self.hit else None

    def drag(self, handle, point): self._record("drag", handle, point)
    def drop(self, handle): self._record("drop", handle)

    def rotate_start(self, handle, point, angle):
        self._record("rotate_start", handle, point, angle)
        return {"componentAngle": self.component_angle}

    def get_current_angle(self, handle):
        self._record("get_current_angle", handle)
        return {"angle": self.component_angle}

    def rotate(self, handle, angle, delta):
        self._record("rotate", handle, angle, delta)
        self.component_angle = angle

    def rotate_end(self, handle): self._record("rotate_end", handle)

    def adjust_trajectory(self, angle, index_distance, point):
        self._record("adjust_trajectory", angle, index_distance, point)

    def start_slingshot(self, point, distance, angle):
        self._record("start_slingshot", point, distance, angle)
        return "slingshot-1"

    def update_slingshot(self, point, distance, angle): self._record("update_slingshot", point, distance, angle)
    def release_slingshot(self, handle): self._record("release_slingshot", handle)

    def start_drawing(self, point): self._record("start_drawing", point)
    def continue_drawing(self, point): self._record("continue_drawing", point)
    def end_drawing(self): self._record("end_drawing")
    def start_erasing(self, point): self._record("start_erasing", point)
    def continue_erasing(self, point): self._record("continue_erasing", point)
    def end_erasing(self): self._record("end_erasing")

    def is_pointer_in_palette(self, point):
        return self.in_palette

    def attempt_color_pick(self, point): self._record("attempt_color_pick", point)
    def clear_board(self): self._record("clear_board")

    def evaluate(self, requested): self._record("evaluate", requested)
    def toggle_switch(self): self._record("toggle_switch")
    def request_assistance(self): self._record("request_assistance")
