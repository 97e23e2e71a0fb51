from __future__ import annotations
from .errors import (
    BlockDriverError,
    EditorScriptError,
    NotFound,
    ResolutionError,
    SessionError,
)
from .session import (
    DocumentLocations,
    EditorSession,
    ScreenDirection,
    screen_direction,
    switch_rtl,
)
from .locator import (
    find_block_by_type_in_category,
    find_block_by_type_on_surface,
    find_category,
    find_nth_block_in_category,
    resolve_by_id,
)
from .inspector import (
    BlockRef,
    ConnectionRef,
    all_blocks,
    block_count,
    connection_target,
    is_connected,
    selected_element,
    selected_id,
)
from .gestures import (
    NEXT,
    OUTPUT,
    PREVIOUS,
    ConnectionName,
    Delta,
    ScreenPoint,
    named_input,
    point_of,
    save_gesture_trajectory_jpeg,
    set_trajectory_callback,
)
from .gestures.behaviors import (
    connect_by_drag,
    drag_block_type_from_flyout,
    drag_from_flyout,
    drag_nth_block_from_flyout,
    right_click_and_select,
)
from .controller import EditorController

__all__ = [
    "BlockDriverError",
    "EditorScriptError",
    "NotFound",
    "ResolutionError",
    "SessionError",
    "DocumentLocations",
    "EditorSession",
    "ScreenDirection",
    "screen_direction",
    "switch_rtl",
    "find_block_by_type_in_category",
    "find_block_by_type_on_surface",
    "find_category",
    "find_nth_block_in_category",
    "resolve_by_id",
    "BlockRef",
    "ConnectionRef",
    "all_blocks",
    "block_count",
    "connection_target",
    "is_connected",
    "selected_element",
    "selected_id",
    "NEXT",
    "OUTPUT",
    "PREVIOUS",
    "ConnectionName",
    "Delta",
    "ScreenPoint",
    "named_input",
    "point_of",
    "save_gesture_trajectory_jpeg",
    "set_trajectory_callback",
    "connect_by_drag",
    "drag_block_type_from_flyout",
    "drag_from_flyout",
    "drag_nth_block_from_flyout",
    "right_click_and_select",
    "EditorController",
]
