"""Tests for the EditorController façade."""

from unittest.mock import AsyncMock

import pytest

from blockdriver.controller import EditorController
from blockdriver.gestures import behaviors
from blockdriver.inspector import BlockRef
from blockdriver.session import EditorSession


@pytest.fixture
def controller(session):
    return EditorController(session)


class TestEditorController:
    @pytest.mark.asyncio
    async def test_open(self, tab):
        browser = AsyncMock()
        browser.get.return_value = tab
        session = EditorSession(starter=AsyncMock(return_value=browser), environ={})
        controller = EditorController(session)

        assert await controller.open("file:///p.html") is controller
        assert session.tab is tab

    @pytest.mark.asyncio
    async def test_blocks(self, controller, tab):
        tab.on_evaluate([{"type": "math_number", "id": "n"}])

        assert await controller.blocks() == [BlockRef("math_number", "n")]
        assert await controller.block_count() == 1

    @pytest.mark.asyncio
    async def test_connect_delegates(self, controller, monkeypatch):
        connect = AsyncMock()
        monkeypatch.setattr(behaviors, "connect_by_drag", connect)

        await controller.connect("a", "OUTPUT", "b", "VALUE")

        connect.assert_awaited_once_with(
            controller.session,
            "a",
            "OUTPUT",
            "b",
            "VALUE",
            mutator_block_id=None,
            drag_origin=None,
        )

    @pytest.mark.asyncio
    async def test_connection_point(self, controller):
        controller.session.execute = AsyncMock(return_value={"x": 3, "y": 4})
        point = await controller.connection_point("a", "NEXT")
        assert (point.x, point.y) == (3.0, 4.0)
