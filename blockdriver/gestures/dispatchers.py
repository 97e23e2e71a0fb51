from __future__ import annotations
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from zendriver import cdp

from ..config import cfg
from ..errors import SessionError
from ..utils import clamp
from .geometry import ScreenPoint, element_center
from .telemetry import get_gesture_recorder

_BUTTON_MASKS = {"none": 0, "left": 1, "right": 2, "middle": 4}


@dataclass
class _TabCDPState:
    last_send_ts: Optional[float] = None


def _get_cdp_state(tab) -> _TabCDPState:
    if not hasattr(tab, "_blockdriver_cdp_state"):
        tab._blockdriver_cdp_state = _TabCDPState()
    return tab._blockdriver_cdp_state


async def _send_cdp_event(tab, make_command: Callable[[], Any], *, label: str) -> Any:
    """Throttled, bounded-time CDP send. Failures raise SessionError."""
    state = _get_cdp_state(tab)
    now = time.perf_counter()
    if state.last_send_ts is not None:
        gap = now - state.last_send_ts
        if gap < cfg.CDP_SEND_MIN_INTERVAL_S:
            await asyncio.sleep(cfg.CDP_SEND_MIN_INTERVAL_S - gap)

    start = time.perf_counter()
    try:
        return await asyncio.wait_for(
            tab.send(make_command()), timeout=cfg.CDP_SEND_TIMEOUT_S
        )
    except asyncio.TimeoutError as exc:
        logging.getLogger(__name__).warning(
            "CDP %s got no reply after %.1f ms",
            label,
            (time.perf_counter() - start) * 1000.0,
        )
        raise SessionError(f"CDP {label} timed out") from exc
    except Exception as exc:
        raise SessionError(f"CDP {label} failed: {exc}") from exc
    finally:
        state.last_send_ts = time.perf_counter()


def _resolve_mouse_button(name: str = "left") -> cdp.input_.MouseButton:
    """Return the CDP mouse button enum member for ``name``."""
    return cdp.input_.MouseButton(name)


def _ease_fraction_symmetric(
    timeline_fraction: float, power: float = cfg.EASE_POWER
) -> float:
    """Symmetric ease-in/ease-out mapping of t in [0,1] with a tunable exponent."""
    t = clamp(timeline_fraction, 0.0, 1.0)
    up, down = t**power, (1.0 - t) ** power
    return up / (up + down) if (up + down) > 0 else t


def interpolate_path(
    start: ScreenPoint, end: ScreenPoint, steps: Optional[int] = None
) -> List[ScreenPoint]:
    """Eased straight-line path from start to end; first and last points are exact."""
    steps = max(1, int(steps if steps is not None else cfg.DRAG_STEPS))
    path = [start]
    for i in range(1, steps):
        f = _ease_fraction_symmetric(i / steps)
        path.append(
            ScreenPoint(
                start.x + (end.x - start.x) * f, start.y + (end.y - start.y) * f
            )
        )
    path.append(end)
    return path


async def mouse_move(tab, point: ScreenPoint, *, held: Optional[str] = None) -> None:
    """Move the pointer; ``held`` names the button kept pressed during a drag."""
    kwargs = {}
    if held is not None:
        kwargs = {"button": _resolve_mouse_button(held), "buttons": _BUTTON_MASKS[held]}
    get_gesture_recorder(tab).log_move(point.x, point.y)
    await _send_cdp_event(
        tab,
        lambda: cdp.input_.dispatch_mouse_event(
            type_="mouseMoved", x=float(point.x), y=float(point.y), **kwargs
        ),
        label="mouseMoved",
    )


async def mouse_press(tab, point: ScreenPoint, button_name: str = "left") -> None:
    get_gesture_recorder(tab).log_down(point.x, point.y, button_name)
    await _send_cdp_event(
        tab,
        lambda: cdp.input_.dispatch_mouse_event(
            type_="mousePressed",
            x=float(point.x),
            y=float(point.y),
            button=_resolve_mouse_button(button_name),
            buttons=_BUTTON_MASKS[button_name],
            click_count=1,
        ),
        label="mousePressed",
    )


async def mouse_release(tab, point: ScreenPoint, button_name: str = "left") -> None:
    get_gesture_recorder(tab).log_up(point.x, point.y, button_name)
    await _send_cdp_event(
        tab,
        lambda: cdp.input_.dispatch_mouse_event(
            type_="mouseReleased",
            x=float(point.x),
            y=float(point.y),
            button=_resolve_mouse_button(button_name),
            buttons=0,
            click_count=1,
        ),
        label="mouseReleased",
    )


async def click_at(tab, point: ScreenPoint, *, button_name: str = "left") -> None:
    """Emit a full click (move, press, short delay, release) at ``point``."""
    await mouse_move(tab, point)
    get_gesture_recorder(tab).log_click(point.x, point.y, button_name)
    await mouse_press(tab, point, button_name)
    await asyncio.sleep(cfg.CLICK_DOWN_UP_DELAY_S)
    await mouse_release(tab, point, button_name)


async def click_element(tab, element, *, button_name: str = "left") -> ScreenPoint:
    """Click the centre of an element's layout box."""
    point = await element_center(tab, element)
    await click_at(tab, point, button_name=button_name)
    return point


async def drag_between(tab, start: ScreenPoint, end: ScreenPoint) -> None:
    """Press at ``start``, move to ``end`` with the left button held, release."""
    logging.getLogger(__name__).debug(
        "Dragging (%.1f, %.1f) -> (%.1f, %.1f)", start.x, start.y, end.x, end.y
    )
    await mouse_move(tab, start)
    await mouse_press(tab, start)
    await asyncio.sleep(cfg.DRAG_HOLD_S)
    for point in interpolate_path(start, end)[1:]:
        await mouse_move(tab, point, held="left")
        await asyncio.sleep(cfg.DRAG_STEP_INTERVAL_S)
    await mouse_release(tab, end)
    await asyncio.sleep(cfg.GESTURE_SETTLE_S)
