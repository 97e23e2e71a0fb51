from __future__ import annotations
import asyncio
import math
import logging
from typing import Set, Tuple
from pathlib import Path as FSPath
from PIL import Image, ImageDraw

from ..config import cfg
from ..utils import clamp
from . import telemetry
from .telemetry import get_gesture_recorder
from .geometry import get_viewport


# Running callback tasks; the event loop only keeps weak references.
_CALLBACK_TASKS: Set["asyncio.Task[None]"] = set()


def _callback_done(task: "asyncio.Task[None]") -> None:
    _CALLBACK_TASKS.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logging.getLogger(__name__).error(
            "Trajectory callback failed: %r", exc, exc_info=exc
        )


def _speed_to_rgb(speed, v_min, v_max):
    """
    Map speed to RGB:
      - slow  => blue (0, 120, 255)
      - mid   => green (60, 205, 60)
      - fast  => red  (255, 60, 60)
    Uses two-segment interpolation: blue->green->red.
    """
    if v_max <= v_min:
        t = 0.0
    else:
        t = (speed - v_min) / (v_max - v_min)
    t = clamp(t, 0.0, 1.0)

    if t <= 0.5:
        u = t / 0.5
        r0, g0, b0 = (0, 120, 255)
        r1, g1, b1 = (60, 205, 60)
    else:
        u = (t - 0.5) / 0.5
        r0, g0, b0 = (60, 205, 60)
        r1, g1, b1 = (255, 60, 60)
    return (int(r0 + (r1 - r0) * u), int(g0 + (g1 - g0) * u), int(b0 + (b1 - b0) * u))


async def save_gesture_trajectory_jpeg(
    tab,
    outfile: str = "gesture_trajectory.jpg",
    *,
    background_color: Tuple[int, int, int] = (12, 12, 14),
    path_line_width: int = 2,
    marker_radius: int = 5,
    canvas_margin: int = 20,
    annotate: bool = True,
) -> str:
    """
    Render the drags and clicks sent to ``tab`` into a JPEG. Each drag segment
    is coloured by its speed; presses are green dots, releases red dots and
    clicks rings (orange for right clicks). Useful when a connect-by-drag
    lands somewhere unexpected.
    """
    viewport_width, viewport_height = await get_viewport(tab)
    recorder = get_gesture_recorder(tab)
    strokes = recorder.drags()
    clicks = [e for e in recorder.events if e.kind == "click"]

    def _render() -> str:
        canvas_width = viewport_width + canvas_margin * 2
        canvas_height = viewport_height + canvas_margin * 2
        image = Image.new("RGB", (canvas_width, canvas_height), background_color)
        draw = ImageDraw.Draw(image)

        def to_canvas(x, y):
            x = canvas_margin + clamp(x, 0.0, viewport_width - 1.0)
            y = canvas_margin + clamp(y, 0.0, viewport_height - 1.0)
            return x, y

        if not strokes and not clicks:
            if annotate:
                draw.text(
                    (canvas_margin, canvas_margin),
                    "No gestures recorded",
                    fill=(180, 180, 180),
                )
            image.save(outfile, format="JPEG", quality=92, optimize=True)
            return outfile

        v_min = cfg.MIN_SPEED_PX_PER_MS
        v_max = max(cfg.MAX_SPEED_PX_PER_MS, v_min + 1e-6)
        total_distance = 0.0

        for stroke in strokes:
            for prev, cur in zip(stroke, stroke[1:]):
                dt_ms = max(1.0, (cur.t - prev.t) * 1000.0)
                dist_px = math.hypot(cur.x - prev.x, cur.y - prev.y)
                total_distance += dist_px
                draw.line(
                    [to_canvas(prev.x, prev.y), to_canvas(cur.x, cur.y)],
                    fill=_speed_to_rgb(dist_px / dt_ms, v_min, v_max),
                    width=path_line_width,
                )
            for event, color in ((stroke[0], (80, 220, 120)), (stroke[-1], (255, 80, 80))):
                x, y = to_canvas(event.x, event.y)
                draw.ellipse(
                    [x - marker_radius, y - marker_radius, x + marker_radius, y + marker_radius],
                    fill=color,
                )

        for ev in clicks:
            x, y = to_canvas(ev.x, ev.y)
            outline = (255, 140, 40) if ev.button == "right" else (255, 200, 80)
            draw.ellipse(
                [x - marker_radius, y - marker_radius, x + marker_radius, y + marker_radius],
                outline=outline,
                width=2,
            )

        if annotate:
            draw.text(
                (canvas_margin, canvas_height - canvas_margin - 14),
                f"Drags: {len(strokes)} | clicks: {len(clicks)} | "
                f"drag distance {total_distance:.0f} px",
                fill=(200, 200, 200),
            )

        image.save(outfile, format="JPEG", quality=92, optimize=True)
        return outfile

    outfile_path = await asyncio.to_thread(_render)

    cb = telemetry._TRAJECTORY_CALLBACK
    if cb is not None:
        task = asyncio.create_task(cb(FSPath(outfile_path)))
        _CALLBACK_TASKS.add(task)
        task.add_done_callback(_callback_done)
    else:
        logging.getLogger(__name__).debug(
            "Trajectory saved to %s but no trajectory callback is registered",
            outfile_path,
        )

    return outfile_path
