from .geometry import (
    OUTPUT,
    PREVIOUS,
    NEXT,
    ConnectionKind,
    ConnectionName,
    Delta,
    ScreenPoint,
    ViewportUnavailable,
    get_element_rect,
    named_input,
    parse_connection,
    point_of,
)
from .dispatchers import click_at, click_element, drag_between
from .render import save_gesture_trajectory_jpeg
from .telemetry import set_trajectory_callback, get_gesture_recorder

__all__ = [
    "OUTPUT",
    "PREVIOUS",
    "NEXT",
    "ConnectionKind",
    "ConnectionName",
    "Delta",
    "ScreenPoint",
    "ViewportUnavailable",
    "get_element_rect",
    "named_input",
    "parse_connection",
    "point_of",
    "click_at",
    "click_element",
    "drag_between",
    "save_gesture_trajectory_jpeg",
    "set_trajectory_callback",
    "get_gesture_recorder",
]
