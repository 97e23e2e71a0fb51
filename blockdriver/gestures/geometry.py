from __future__ import annotations
import asyncio
import enum
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, Tuple, Union

from zendriver import cdp
from zendriver.core.connection import ProtocolException

from ..scripts import CONNECTION_LOCATION, script_error
from ..errors import NotFound, ResolutionError, SessionError

if TYPE_CHECKING:
    from ..session import EditorSession


class ViewportUnavailable(SessionError):
    """Raised when viewport size cannot be determined from CDP."""

    pass


# ==============================================
# Points and offsets
# ==============================================


@dataclass(frozen=True)
class Delta:
    """Relative (dx, dy) offset that parameterizes a drag."""

    dx: float
    dy: float


@dataclass(frozen=True)
class ScreenPoint:
    """Absolute viewport position in CSS pixels."""

    x: float
    y: float

    def __add__(self, other: Delta) -> "ScreenPoint":
        if not isinstance(other, Delta):
            return NotImplemented
        return ScreenPoint(self.x + other.dx, self.y + other.dy)

    def __sub__(self, other: "ScreenPoint") -> Delta:
        if not isinstance(other, ScreenPoint):
            return NotImplemented
        return Delta(self.x - other.x, self.y - other.y)


DeltaLike = Union[Delta, Tuple[float, float]]


def as_delta(value: DeltaLike) -> Delta:
    """Accept a Delta or an (dx, dy) pair."""
    if isinstance(value, Delta):
        return value
    dx, dy = value
    return Delta(float(dx), float(dy))


# ==============================================
# Connection names
# ==============================================


class ConnectionKind(enum.Enum):
    OUTPUT = "output"
    PREVIOUS = "previous"
    NEXT = "next"
    INPUT = "input"


@dataclass(frozen=True)
class ConnectionName:
    """One connection role on a block: a structural link or a named input."""

    kind: ConnectionKind
    input_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is ConnectionKind.INPUT and not self.input_name:
            raise ValueError("an input connection needs an input name")
        if self.kind is not ConnectionKind.INPUT and self.input_name is not None:
            raise ValueError(f"{self.kind.name} connections take no input name")

    def to_script(self) -> Dict[str, Optional[str]]:
        """Payload understood by the connection scripts."""
        return {"kind": self.kind.value, "name": self.input_name}

    def __str__(self) -> str:
        if self.kind is ConnectionKind.INPUT:
            return f"input {self.input_name}"
        return self.kind.name


OUTPUT = ConnectionName(ConnectionKind.OUTPUT)
PREVIOUS = ConnectionName(ConnectionKind.PREVIOUS)
NEXT = ConnectionName(ConnectionKind.NEXT)

_STRUCTURAL = {"OUTPUT": OUTPUT, "PREVIOUS": PREVIOUS, "NEXT": NEXT}

ConnectionLike = Union[str, ConnectionName]


def named_input(name: str) -> ConnectionName:
    return ConnectionName(ConnectionKind.INPUT, name)


def parse_connection(value: ConnectionLike) -> ConnectionName:
    """OUTPUT/PREVIOUS/NEXT map to structural links, anything else names an input."""
    if isinstance(value, ConnectionName):
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"not a connection name: {value!r}")
    return _STRUCTURAL.get(value) or named_input(value)


def connection_from_script(kind: str, name: Optional[str] = None) -> ConnectionName:
    return ConnectionName(ConnectionKind(kind), name if kind == "input" else None)


# ==============================================
# Connection geometry
# ==============================================


async def point_of(
    session: "EditorSession",
    block_id: str,
    connection: ConnectionLike,
    mutator_block_id: Optional[str] = None,
) -> ScreenPoint:
    """Screen position of a block's connection.

    The block is looked up on the main workspace, or inside the mutator
    workspace of ``mutator_block_id`` when given. The connection's offset in
    its block is added to the block's position on its surface and the sum is
    converted with the main workspace's current pan/zoom/scroll transform.
    """
    if not block_id:
        raise ResolutionError("a block id is required to locate a connection")
    name = parse_connection(connection)
    result = await session.execute(
        CONNECTION_LOCATION, block_id, name.to_script(), mutator_block_id
    )
    error = script_error(result)
    if error:
        raise ResolutionError(error)
    point = ScreenPoint(float(result["x"]), float(result["y"]))
    logging.getLogger(__name__).debug(
        "Connection %s of block %s%s is at (%.1f, %.1f)",
        name,
        block_id,
        f" (mutator of {mutator_block_id})" if mutator_block_id else "",
        point.x,
        point.y,
    )
    return point


# ==============================================
# Element geometry
# ==============================================


def _unwrap_zendriver_value(possibly_wrapped: Any) -> Any:
    """Normalize zendriver responses into plain dicts or values."""
    value = possibly_wrapped
    if isinstance(value, tuple):
        value = value[0] if value else {}
    method = getattr(value, "to_json", None)
    if callable(method):
        return method()
    return value or {}


def _quad_to_bounding_rect(quad: Sequence[float]) -> Dict[str, float]:
    """Convert an 8-number quad to a bounding rect dict."""
    xs = [quad[0], quad[2], quad[4], quad[6]]
    ys = [quad[1], quad[3], quad[5], quad[7]]
    x_min, x_max = min(xs), max(xs)
    y_min, y_max = min(ys), max(ys)
    width = max(0.0, x_max - x_min)
    height = max(0.0, y_max - y_min)
    return {
        "x": x_min,
        "y": y_min,
        "width": width,
        "height": height,
        "cx": x_min + width / 2.0,
        "cy": y_min + height / 2.0,
    }


def _content_quad(box_model: Any) -> Optional[Sequence[float]]:
    bm = _unwrap_zendriver_value(box_model)
    if isinstance(bm, dict):
        model = bm.get("model") or bm
        content = model.get("content")
    else:
        content = getattr(bm, "content", None)
    if not content or len(content) < 8:
        return None
    return content


async def get_element_rect(tab, element) -> Dict[str, float]:
    """Return {x,y,width,height,cx,cy} of an element handle in viewport pixels."""
    last_error: Optional[BaseException] = None
    for key, id_type in (
        ("backend_node_id", cdp.dom.BackendNodeId),
        ("node_id", cdp.dom.NodeId),
    ):
        node = getattr(element, key, None)
        if not node:
            continue
        try:
            resp = await tab.send(cdp.dom.get_box_model(**{key: id_type(node)}))
        except ProtocolException as exc:
            # stale id, try the next one
            last_error = exc
            logging.getLogger(__name__).debug(
                "DOM.getBoxModel(%s=%s) failed: %r", key, node, exc
            )
            continue
        except Exception as exc:
            raise SessionError(f"DOM.getBoxModel failed: {exc}") from exc
        quad = _content_quad(resp)
        if quad:
            return _quad_to_bounding_rect(quad)
    raise NotFound(
        "element has no layout box; it is detached or not rendered"
    ) from last_error


async def element_center(tab, element) -> ScreenPoint:
    rect = await get_element_rect(tab, element)
    return ScreenPoint(rect["cx"], rect["cy"])


async def get_viewport(
    tab,
    *,
    timeout_seconds: float = 1.5,
    poll_interval_seconds: float = 0.05,
) -> Tuple[int, int]:
    """Viewport (width, height), from layout metrics with a window.inner* fallback."""

    def _val(obj: Any, *names: str) -> int:
        for name in names:
            raw = obj.get(name) if isinstance(obj, dict) else getattr(obj, name, None)
            try:
                value = int(float(raw or 0))
            except (TypeError, ValueError):
                value = 0
            if value > 0:
                return value
        return 0

    async def _try_cdp() -> Tuple[int, int]:
        raw = await tab.send(cdp.page.get_layout_metrics())
        layout = raw[0] if isinstance(raw, tuple) and raw else raw
        if isinstance(layout, dict):
            layout = layout.get("layoutViewport") or layout
        w = _val(layout, "client_width", "clientWidth")
        h = _val(layout, "client_height", "clientHeight")
        return w, h

    async def _try_runtime() -> Tuple[int, int]:
        resp = await tab.send(
            cdp.runtime.evaluate(
                expression="({w: window.innerWidth || 0, h: window.innerHeight || 0})",
                return_by_value=True,
                await_promise=False,
            )
        )
        res = resp[0] if isinstance(resp, tuple) and resp else resp
        val = res.get("value") if isinstance(res, dict) else getattr(res, "value", None)
        if not isinstance(val, dict):
            return 0, 0
        return _val(val, "w"), _val(val, "h")

    start = time.perf_counter()
    last_error: Optional[BaseException] = None
    while True:
        for attempt in (_try_cdp, _try_runtime):
            try:
                w, h = await attempt()
            except Exception as exc:
                last_error = exc
                continue
            if w > 0 and h > 0:
                return w, h
        if (time.perf_counter() - start) >= timeout_seconds:
            break
        await asyncio.sleep(poll_interval_seconds)

    raise ViewportUnavailable(
        f"Viewport did not become ready within {timeout_seconds:.2f}s"
        + (f" last error: {last_error!r}" if last_error else "")
    )
