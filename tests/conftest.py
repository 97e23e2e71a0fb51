"""Shared pytest fixtures for blockdriver tests.

The fakes stand in for zendriver's Tab and Element. ``FakeTab.send`` unpacks
the CDP command generator the same way zendriver does (``next(command)``), so
tests can assert on the exact method and params that would go over the wire.
"""

from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
from zendriver.core.connection import ProtocolException

from blockdriver.config import cfg
from blockdriver.session import EditorSession


class FakeElement:
    """Minimal stand-in for zendriver.Element."""

    def __init__(self, backend_node_id: int, text: str = "", attrs=None):
        self.backend_node_id = backend_node_id
        self.node_id = None
        self.text_all = text
        self.attrs = dict(attrs or {})
        self.query_selector = AsyncMock(return_value=None)
        self.query_selector_all = AsyncMock(return_value=[])
        self.select_option = AsyncMock()


class FakeTab:
    """Records CDP messages and answers them from per-method handlers."""

    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self.handlers: Dict[str, Callable[[Dict[str, Any]], Any]] = {
            "DOM.getBoxModel": self._box_model,
        }
        self.boxes: Dict[int, tuple] = {}
        self.query_selector = AsyncMock(return_value=None)
        self.query_selector_all = AsyncMock(return_value=[])
        self._next_node_id = 100

    def element(self, text: str = "", box=(0.0, 0.0, 10.0, 10.0), attrs=None) -> FakeElement:
        self._next_node_id += 1
        self.boxes[self._next_node_id] = box
        return FakeElement(self._next_node_id, text=text, attrs=attrs)

    def on(self, method: str, handler: Callable[[Dict[str, Any]], Any]) -> None:
        self.handlers[method] = handler

    def on_evaluate(self, value: Any, exception: Optional[Any] = None) -> None:
        self.on(
            "Runtime.evaluate",
            lambda params: (SimpleNamespace(value=value), exception),
        )

    async def send(self, command):
        message = next(command)
        self.sent.append(message)
        handler = self.handlers.get(message["method"])
        return handler(message.get("params", {})) if handler else None

    def _box_model(self, params):
        node = params.get("backendNodeId") or params.get("nodeId")
        if node not in self.boxes:
            raise ProtocolException(
                {"code": -32000, "message": f"No node with given id found: {node}"}
            )
        x, y, w, h = self.boxes[node]
        return {"content": [x, y, x + w, y, x + w, y + h, x, y + h]}

    def mouse_events(self) -> List[Dict[str, Any]]:
        return [
            m["params"] for m in self.sent if m["method"] == "Input.dispatchMouseEvent"
        ]


@pytest.fixture(autouse=True)
def fast_timings(monkeypatch):
    """Shrink every wait and pause so tests run instantly."""
    for name, value in {
        "ELEMENT_WAIT_S": 0.05,
        "POLL_INTERVAL_S": 0.01,
        "FLYOUT_SETTLE_S": 0.0,
        "MENU_SETTLE_S": 0.0,
        "RTL_SETTLE_S": 0.0,
        "GESTURE_SETTLE_S": 0.0,
        "DRAG_STEP_INTERVAL_S": 0.0,
        "DRAG_HOLD_S": 0.0,
        "CLICK_DOWN_UP_DELAY_S": 0.0,
        "CDP_SEND_MIN_INTERVAL_S": 0.0,
    }.items():
        monkeypatch.setattr(cfg, name, value)


@pytest.fixture
def tab() -> FakeTab:
    return FakeTab()


@pytest.fixture
def session(tab: FakeTab) -> EditorSession:
    """An EditorSession whose document is already open in ``tab``."""
    browser = SimpleNamespace(get=AsyncMock(return_value=tab), stop=AsyncMock())
    editor_session = EditorSession(starter=AsyncMock(return_value=browser))
    editor_session._browser = browser
    editor_session._tab = tab
    return editor_session
