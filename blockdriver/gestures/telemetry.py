from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Callable, Awaitable
from pathlib import Path as FSPath
import time
import logging

TrajectoryCallback = Optional[Callable[[FSPath], Awaitable[None]]]
_TRAJECTORY_CALLBACK: TrajectoryCallback = None


def set_trajectory_callback(cb: TrajectoryCallback) -> None:
    """Register an async callback invoked whenever a trajectory JPEG is saved."""
    global _TRAJECTORY_CALLBACK
    _TRAJECTORY_CALLBACK = cb
    logging.getLogger(__name__).info(
        "Gesture trajectory callback %s", "registered" if cb else "cleared"
    )


@dataclass
class GestureEvent:
    """One synthesized pointer event."""

    x: float
    y: float
    t: float  # seconds since start (monotonic)
    kind: str  # "move"|"down"|"up"|"click"
    button: str = "left"


@dataclass
class GestureRecorder:
    """Collects the pointer events sent to one tab.

    Drags show up as a "down", a run of "move" events and an "up"; clicks are
    recorded as a single "click" marker next to their own down/up pair.
    """

    events: List[GestureEvent] = field(default_factory=list)
    start_ts: float = field(default_factory=lambda: time.perf_counter())

    def _now(self) -> float:
        return time.perf_counter() - self.start_ts

    def log_move(self, x: float, y: float) -> None:
        self.events.append(GestureEvent(x, y, self._now(), "move"))

    def log_down(self, x: float, y: float, button: str = "left") -> None:
        self.events.append(GestureEvent(x, y, self._now(), "down", button))

    def log_up(self, x: float, y: float, button: str = "left") -> None:
        self.events.append(GestureEvent(x, y, self._now(), "up", button))

    def log_click(self, x: float, y: float, button: str = "left") -> None:
        self.events.append(GestureEvent(x, y, self._now(), "click", button))

    def drags(self) -> List[List[GestureEvent]]:
        """Group events into press..release strokes that moved in between."""
        strokes: List[List[GestureEvent]] = []
        current: Optional[List[GestureEvent]] = None
        for event in self.events:
            if event.kind == "down":
                current = [event]
            elif current is not None and event.kind == "move":
                current.append(event)
            elif current is not None and event.kind == "up":
                current.append(event)
                if any(e.kind == "move" for e in current):
                    strokes.append(current)
                current = None
        return strokes

    def reset(self) -> None:
        """Clear all recorded events and reset the time origin to now."""
        self.events.clear()
        self.start_ts = time.perf_counter()


def get_gesture_recorder(tab) -> GestureRecorder:
    if not hasattr(tab, "_blockdriver_gesture_recorder"):
        tab._blockdriver_gesture_recorder = GestureRecorder()
    return tab._blockdriver_gesture_recorder
